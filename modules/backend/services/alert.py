"""
Alert Service.

Keeps system alerts in process memory. Rules come from alerts.yaml and
are evaluated against the request metrics snapshot and a database check.
A rule that fired stays quiet for its cooldown; when its metric returns
to normal the open alerts for that rule are resolved.

Usage:
    service = get_alert_service()
    fired = await service.check_system()
    health = service.system_health()
"""

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import uuid4

from modules.backend.core.config import get_app_config
from modules.backend.core.database import check_database
from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.logging import get_logger, log_with_source
from modules.backend.core.metrics import MetricsSnapshot, get_metrics_collector
from modules.backend.core.utils import utc_now
from modules.backend.schemas.alert import AlertRuleUpdate, AlertStats, SystemHealth

logger = get_logger(__name__)

MAX_STORED_ALERTS = 1000
SEVERITIES = ("low", "medium", "high", "critical")


@dataclass
class Alert:
    rule: str
    severity: str
    title: str
    message: str
    user_id: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utc_now)
    resolved: bool = False
    resolved_at: datetime | None = None


@dataclass
class AlertRule:
    name: str
    metric: str
    threshold: float
    severity: str
    title: str
    message: str
    cooldown_minutes: int
    enabled: bool = True
    last_triggered_at: datetime | None = None

    def in_cooldown(self, now: datetime) -> bool:
        if self.last_triggered_at is None:
            return False
        return now - self.last_triggered_at < timedelta(minutes=self.cooldown_minutes)


def rules_from_config() -> dict[str, AlertRule]:
    return {
        name: AlertRule(name=name, **rule.model_dump())
        for name, rule in get_app_config().alerts.rules.items()
    }


class AlertService:
    def __init__(
        self,
        rules: dict[str, AlertRule] | None = None,
        max_alerts: int = MAX_STORED_ALERTS,
    ) -> None:
        self._rules = rules if rules is not None else rules_from_config()
        self._alerts: deque[Alert] = deque(maxlen=max_alerts)
        self._last_metrics: dict[str, float] = {}

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    def create_alert(
        self,
        rule: str,
        severity: str,
        title: str,
        message: str,
        user_id: str | None = None,
    ) -> Alert:
        alert = Alert(rule=rule, severity=severity, title=title, message=message, user_id=user_id)
        self._alerts.append(alert)
        log_with_source(
            logger,
            "internal",
            "warning",
            "Alert raised",
            alert_id=alert.id,
            rule=rule,
            severity=severity,
        )
        return alert

    def list_alerts(self, user_id: str | None = None, limit: int = 50) -> list[Alert]:
        alerts = [a for a in reversed(self._alerts) if user_id is None or a.user_id == user_id]
        return alerts[:limit]

    def active_alerts(self) -> list[Alert]:
        return [a for a in reversed(self._alerts) if not a.resolved]

    def get_alert(self, alert_id: str) -> Alert:
        for alert in self._alerts:
            if alert.id == alert_id:
                return alert
        raise NotFoundError("Alert not found")

    def resolve(self, alert_id: str) -> Alert:
        alert = self.get_alert(alert_id)
        if not alert.resolved:
            alert.resolved = True
            alert.resolved_at = utc_now()
        return alert

    def get_stats(self) -> AlertStats:
        alerts = list(self._alerts)
        active = [a for a in alerts if not a.resolved]
        return AlertStats(
            total=len(alerts),
            active=len(active),
            resolved=len(alerts) - len(active),
            critical=sum(1 for a in active if a.severity == "critical"),
            by_severity={
                severity: sum(1 for a in alerts if a.severity == severity)
                for severity in SEVERITIES
            },
        )

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def list_rules(self) -> list[AlertRule]:
        return list(self._rules.values())

    def update_rule(self, name: str, data: AlertRuleUpdate) -> AlertRule:
        rule = self._rules.get(name)
        if rule is None:
            raise NotFoundError(f"Alert rule '{name}' not found")
        for key, value in data.model_dump(exclude_none=True).items():
            setattr(rule, key, value)
        logger.info("Alert rule updated", extra={"rule": name})
        return rule

    def evaluate(
        self,
        snapshot: MetricsSnapshot,
        database_ok: bool,
        now: datetime | None = None,
    ) -> list[Alert]:
        """Apply every enabled rule to the given measurements."""
        now = now or utc_now()
        values = {
            **snapshot.as_dict(),
            "database_down": 0.0 if database_ok else 1.0,
        }
        self._last_metrics = values

        fired = []
        for rule in self._rules.values():
            if not rule.enabled or rule.metric not in values:
                continue
            if rule.metric in ("error_rate", "avg_response_time_ms") and not snapshot.requests:
                continue

            value = values[rule.metric]
            if value <= rule.threshold:
                self._resolve_rule(rule.name, now)
                continue
            if rule.in_cooldown(now):
                continue

            rule.last_triggered_at = now
            fired.append(
                self.create_alert(
                    rule=rule.name,
                    severity=rule.severity,
                    title=rule.title,
                    message=rule.message.format(value=value, threshold=rule.threshold),
                )
            )
        return fired

    def _resolve_rule(self, rule: str, now: datetime) -> None:
        for alert in self._alerts:
            if alert.rule == rule and not alert.resolved:
                alert.resolved = True
                alert.resolved_at = now

    async def check_system(
        self,
        db_check: Callable[[], Awaitable[None]] = check_database,
        timeout: float = 5.0,
    ) -> list[Alert]:
        """Take a metrics snapshot, check the database and evaluate rules."""
        snapshot = get_metrics_collector().snapshot(reset=True)
        try:
            await asyncio.wait_for(db_check(), timeout=timeout)
            database_ok = True
        except Exception as e:
            logger.error("Database check failed", extra={"error": str(e)})
            database_ok = False

        fired = self.evaluate(snapshot, database_ok)
        if fired:
            await self._notify_admins(fired)
        return fired

    async def _notify_admins(self, alerts: list[Alert]) -> None:
        config = get_app_config()
        admins = config.application.telegram.authorized_users
        if not admins or not config.features.channel_telegram_enabled:
            return

        from modules.telegram.services.notifications import AlertType, get_notification_service

        service = get_notification_service()
        for alert in alerts:
            alert_type = AlertType.ERROR if alert.severity in ("high", "critical") else AlertType.WARNING
            for chat_id in admins:
                await service.send_alert(
                    chat_id,
                    alert.title,
                    alert.message,
                    alert_type,
                    data={"severity": alert.severity, "rule": alert.rule},
                )

    def system_health(self) -> SystemHealth:
        active = self.active_alerts()
        critical = sum(1 for a in active if a.severity == "critical")
        if critical:
            status = "critical"
        elif active:
            status = "warning"
        else:
            status = "healthy"
        return SystemHealth(
            status=status,
            active_alerts=len(active),
            critical_alerts=critical,
            metrics=self._last_metrics or get_metrics_collector().snapshot().as_dict(),
        )


_alert_service: AlertService | None = None


def get_alert_service() -> AlertService:
    global _alert_service
    if _alert_service is None:
        _alert_service = AlertService()
    return _alert_service


async def run_alert_checks(interval_seconds: float) -> None:
    """
    Evaluate alert rules forever, once per interval.

    Started from the application lifespan and cancelled on shutdown. A
    failed check is logged and the loop keeps going.
    """
    service = get_alert_service()
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            fired = await service.check_system()
        except Exception as e:
            logger.error("Alert check failed", extra={"error": str(e)}, exc_info=True)
            continue
        if fired:
            log_with_source(logger, "internal", "warning", "Alerts fired", count=len(fired))
