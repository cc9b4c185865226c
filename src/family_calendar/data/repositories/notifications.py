from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...domain import Notification, NotificationStatus
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class NotificationRepository:
    gateway: SupabaseGateway
    table_name: str

    def insert(self, notification: Notification) -> Notification:
        record = self.gateway.first(
            self.gateway.table(self.table_name).insert(notification.to_record())
        )
        return Notification.from_record(record or notification.to_record())

    def fetch(self, notification_id: str) -> Optional[Notification]:
        record = self.gateway.first(
            self.gateway.table(self.table_name).select("*").eq("id", notification_id).limit(1)
        )
        return Notification.from_record(record) if record else None

    def list_for_recipient(self, user_id: str, status: NotificationStatus) -> list[Notification]:
        records = self.gateway.rows(
            self.gateway.table(self.table_name)
            .select("*")
            .eq("to_user_id", user_id)
            .eq("status", status.value)
            .order("created_at", desc=True)
        )
        return [Notification.from_record(record) for record in records]

    def find_pending(self, from_user_id: str, to_user_id: str) -> Optional[Notification]:
        record = self.gateway.first(
            self.gateway.table(self.table_name)
            .select("*")
            .eq("from_user_id", from_user_id)
            .eq("to_user_id", to_user_id)
            .eq("status", NotificationStatus.PENDING.value)
            .limit(1)
        )
        return Notification.from_record(record) if record else None

    def update_status(self, notification_id: str, status: NotificationStatus) -> Optional[Notification]:
        record = self.gateway.first(
            self.gateway.table(self.table_name)
            .update({"status": status.value})
            .eq("id", notification_id)
        )
        return Notification.from_record(record) if record else None
