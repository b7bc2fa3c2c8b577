import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

import httpx
from fastapi import BackgroundTasks

from lootledger.config import get_settings

logger = logging.getLogger(__name__)


class DiscordColors:
    BLUE = 0x3498DB
    GREEN = 0x2ECC71
    YELLOW = 0xF1C40F


def _fmt(amount) -> str:
    return f"{Decimal(str(amount)):,.2f}"


class Notifier:
    """Schnittstelle für Benachrichtigungen. Standard: tut nichts."""

    def notify_new_drop(self, item_name: str, boss_name: Optional[str] = None) -> None:
        pass

    def notify_sale(self, item_name: str, price, net_amount) -> None:
        pass

    def notify_dividend(self, item_name: str, amount_per_person, recipient_count: int) -> None:
        pass


class NullNotifier(Notifier):
    pass


class DiscordNotifier(Notifier):
    """Postet Embeds an einen Discord-Webhook.

    ``schedule`` entscheidet, wann gesendet wird (an der Request-Grenze:
    ``BackgroundTasks.add_task``). Fehler beim Senden werden geloggt und
    nie an den Aufrufer weitergegeben.
    """

    def __init__(
        self,
        webhook_url: str,
        username: str = "LootLedger StockBot",
        timeout: float = 5.0,
        schedule: Optional[Callable[..., Any]] = None,
    ):
        self.webhook_url = webhook_url
        self.username = username
        self.timeout = timeout
        self.schedule = schedule

    def _dispatch(self, payload: Dict[str, Any]) -> None:
        if self.schedule is not None:
            self.schedule(self.send_webhook, payload)
        else:
            self.send_webhook(payload)

    def send_webhook(self, payload: Dict[str, Any]) -> bool:
        if not self.webhook_url:
            logger.warning("Kein Discord-Webhook konfiguriert, Benachrichtigung übersprungen")
            return False

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.webhook_url, json=payload)
        except httpx.HTTPError as e:
            logger.error("Discord-Webhook fehlgeschlagen: %s", e)
            return False

        if response.status_code >= 300:
            logger.error("Discord-Webhook abgelehnt: %s %s", response.status_code, response.text[:200])
            return False
        return True

    def _embed(self, title: str, description: str, color: int, fields: list, footer: Optional[str] = None) -> Dict[str, Any]:
        embed = {
            "title": title,
            "description": description,
            "color": color,
            "fields": fields,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if footer:
            embed["footer"] = {"text": footer}
        return {"username": self.username, "embeds": [embed]}

    def notify_new_drop(self, item_name: str, boss_name: Optional[str] = None) -> None:
        self._dispatch(self._embed(
            title="💎 Neuer Drop!",
            description=f"**{item_name}** ist gedroppt!",
            color=DiscordColors.BLUE,
            fields=[
                {"name": "Item", "value": item_name, "inline": True},
                {"name": "Boss", "value": boss_name or "Unbekannt", "inline": True},
            ],
        ))

    def notify_sale(self, item_name: str, price, net_amount) -> None:
        self._dispatch(self._embed(
            title="💰 Item verkauft!",
            description=f"**{item_name}** wurde verkauft.",
            color=DiscordColors.GREEN,
            fields=[
                {"name": "Item", "value": item_name, "inline": True},
                {"name": "Verkaufspreis", "value": _fmt(price), "inline": True},
                {"name": "Netto", "value": _fmt(net_amount), "inline": True},
            ],
        ))

    def notify_dividend(self, item_name: str, amount_per_person, recipient_count: int) -> None:
        self._dispatch(self._embed(
            title="💸 Erlös verteilt!",
            description=f"Der Erlös aus **{item_name}** wurde aufgeteilt.",
            color=DiscordColors.YELLOW,
            fields=[
                {"name": "Betrag pro Person", "value": _fmt(amount_per_person), "inline": True},
                {"name": "Empfänger", "value": f"{recipient_count} Mitglieder", "inline": True},
            ],
            footer="Details im Dashboard.",
        ))


def get_notifier(background_tasks: BackgroundTasks) -> Notifier:
    """Dependency für FastAPI - sendet nach der Antwort im Hintergrund."""
    settings = get_settings()
    if not settings.discord_webhook_url:
        return NullNotifier()
    return DiscordNotifier(
        webhook_url=settings.discord_webhook_url,
        username=settings.discord_webhook_username,
        timeout=settings.notification_timeout_seconds,
        schedule=background_tasks.add_task,
    )
