from unittest.mock import MagicMock, patch

import pytest
from django.db import OperationalError
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


def test_health_ok_without_auth():
    resp = APIClient().get("/health/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "ok"}


def test_health_reports_db_down():
    broken = MagicMock()
    broken.__getitem__.return_value.cursor.side_effect = OperationalError("connection refused")
    with patch("config.health.connections", broken):
        resp = APIClient().get("/api/v1/health/")
    assert resp.status_code == 503
    assert resp.json()["code"] == "DB_DOWN"
