"""Serializers for the catalog app."""

from rest_framework import serializers

from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "spec", "type", "original_price", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class ProductCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    spec = serializers.IntegerField(min_value=0, required=False, default=0)
    type = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    original_price = serializers.IntegerField(min_value=0)
