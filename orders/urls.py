"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import DashboardStatsView, OrderDetailView, OrderListCreateView

app_name = "orders"

urlpatterns = [
    path("orders/", OrderListCreateView.as_view(), name="order-list"),
    path("orders/<int:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("statistics/dashboard/", DashboardStatsView.as_view(), name="dashboard-stats"),
]
