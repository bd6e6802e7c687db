"""Stencil (form template) management and config sync.

Saving or deleting a stencil only writes the project config; the stencils
table is updated by the config handlers registered in
``register_config_handlers``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from formflow.core.hooks import HookContext, HookEvent, HookRegistry
from formflow.db.models import Form, Notification, Stencil
from formflow.schemas.forms import flatten_pages
from formflow.schemas.stencils import StencilData, StencilDraft, StencilOption
from formflow.services import integration_service
from formflow.services.project_config import ConfigEvent, ProjectConfigStore
from formflow.utils.datetime_parsing import parse_datetime

logger = logging.getLogger(__name__)

STENCILS_CONFIG_KEY = "formflow.stencils"

NOTIFICATION_FIELDS = ("name", "enabled", "sort_order", "recipient", "subject", "body", "conditions")


def _parse_uuid(value: Any) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


class StencilService:
    def __init__(self, db: Session, config: ProjectConfigStore, hooks: HookRegistry):
        self.db = db
        self.config = config
        self.hooks = hooks

    def register_config_handlers(self) -> None:
        pattern = f"{STENCILS_CONFIG_KEY}.{{uid}}"
        self.config.on_change(pattern, self._on_config_changed)
        self.config.on_remove(pattern, self._on_config_removed)

    def _on_config_changed(self, event: ConfigEvent) -> None:
        self.handle_changed_stencil(event.token_matches[0], event.new_value)

    def _on_config_removed(self, event: ConfigEvent) -> None:
        self.handle_deleted_stencil(event.token_matches[0])

    # Queries

    def get_all_stencils(self, with_trashed: bool = False) -> list[Stencil]:
        query = self.db.query(Stencil)
        if not with_trashed:
            query = query.filter(Stencil.deleted_at.is_(None))
        return query.order_by(Stencil.name).all()

    def get_stencil_options(self) -> list[StencilOption]:
        return [StencilOption(value=s.id, label=s.name) for s in self.get_all_stencils()]

    def get_stencil_by_id(self, stencil_id: UUID) -> Stencil | None:
        return (
            self.db.query(Stencil)
            .filter(Stencil.id == stencil_id, Stencil.deleted_at.is_(None))
            .first()
        )

    def get_stencil_by_handle(self, handle: str) -> Stencil | None:
        return (
            self.db.query(Stencil)
            .filter(Stencil.handle == handle, Stencil.deleted_at.is_(None))
            .first()
        )

    def get_stencil_by_uid(self, uid: str) -> Stencil | None:
        return (
            self.db.query(Stencil)
            .filter(Stencil.uid == uid, Stencil.deleted_at.is_(None))
            .first()
        )

    def _get_stencil_record(self, uid: str) -> Stencil | None:
        """Look up by uid, including soft-deleted rows."""
        return self.db.query(Stencil).filter(Stencil.uid == uid).first()

    # Save

    def save_stencil(self, stencil: StencilDraft) -> bool:
        """
        Validate a stencil and write it to the project config.

        Returns False with errors recorded on ``stencil`` when the handle is
        already used by another live stencil; nothing is written in that case.
        """
        is_new = stencil.id is None

        outcome = self.hooks.trigger(
            HookEvent.BEFORE_SAVE_STENCIL,
            HookContext(stencil=stencil, is_new=is_new),
        )
        if not outcome.is_valid:
            logger.info("Stencil save cancelled by hook")
            return False

        if is_new:
            stencil_uid = str(uuid.uuid4())
        else:
            record = self.db.query(Stencil).filter(Stencil.id == stencil.id).first()
            if record is None:
                stencil.add_error("id", "Stencil not found")
                return False
            stencil_uid = record.uid

        existing = self.get_stencil_by_handle(stencil.handle)
        if existing and (is_new or existing.id != stencil.id):
            stencil.add_error("handle", "That handle is already in use")
            logger.info("Stencil not saved due to validation error.")
            return False

        config_data = None if stencil.deleted_at else stencil.get_config()

        # New stencils start with every globally enabled captcha switched on
        if is_new and config_data is not None:
            for captcha in integration_service.get_all_captchas(self.db):
                if captcha.enabled:
                    integrations = config_data["data"]["settings"].setdefault("integrations", {})
                    integrations.setdefault(captcha.handle, {})["enabled"] = True

        self.config.set(f"{STENCILS_CONFIG_KEY}.{stencil_uid}", config_data)

        if is_new:
            record = self._get_stencil_record(stencil_uid)
            if record is not None:
                stencil.id = record.id
        return True

    def handle_changed_stencil(self, uid: str, data: dict[str, Any]) -> Stencil:
        """Apply a config change to the stencils table in one transaction."""
        try:
            record = self._get_stencil_record(uid)
            is_new = record is None
            if record is None:
                record = Stencil(uid=uid)
                self.db.add(record)

            record.name = data["name"]
            record.handle = data["handle"]
            record.data = data.get("data") or {}
            record.template_id = _parse_uuid(data.get("template"))
            record.default_status_id = _parse_uuid(data.get("defaultStatus"))
            record.submit_action_entry_id = _parse_uuid(data.get("submitActionEntry"))
            record.deleted_at = None

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(record)
        self.hooks.trigger(
            HookEvent.AFTER_SAVE_STENCIL,
            HookContext(stencil=record, is_new=is_new),
        )
        return record

    # Delete

    def delete_stencil_by_id(self, stencil_id: UUID) -> bool:
        stencil = self.get_stencil_by_id(stencil_id)
        if not stencil:
            return False
        return self.delete_stencil(stencil)

    def delete_stencil(self, stencil: Stencil | None) -> bool:
        if not stencil:
            return False

        outcome = self.hooks.trigger(HookEvent.BEFORE_DELETE_STENCIL, HookContext(stencil=stencil))
        if not outcome.is_valid:
            return False

        self.config.remove(f"{STENCILS_CONFIG_KEY}.{stencil.uid}")
        return True

    def handle_deleted_stencil(self, uid: str) -> None:
        """Soft-delete the stencil row for a removed config entry."""
        stencil = self.get_stencil_by_uid(uid)
        self.hooks.trigger(HookEvent.BEFORE_APPLY_STENCIL_DELETE, HookContext(stencil=stencil))

        try:
            record = self._get_stencil_record(uid)
            if record is not None:
                record.deleted_at = datetime.now(timezone.utc)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.hooks.trigger(HookEvent.AFTER_DELETE_STENCIL, HookContext(stencil=stencil))

    # Apply

    def apply_stencil(self, form: Form, stencil: Stencil) -> Form:
        """
        Copy a stencil's settings, fields and notifications onto ``form``.

        Only the in-memory form changes; the caller decides whether to save.
        Availability dates that fail to parse become None.
        """
        data = StencilData.model_validate(stencil.data or {})

        form.settings = dict(data.settings)
        form.require_user = data.require_user
        form.availability = data.availability.value
        form.user_deleted_action = data.user_deleted_action.value
        form.file_uploads_action = data.file_uploads_action.value
        form.data_retention = data.data_retention.value
        form.data_retention_value = data.data_retention_value
        form.availability_submissions = data.availability_submissions
        form.availability_from = parse_datetime(data.availability_from).value if data.availability_from else None
        form.availability_to = parse_datetime(data.availability_to).value if data.availability_to else None

        form.template_id = stencil.template_id
        form.default_status_id = stencil.default_status_id
        form.fields = flatten_pages(data.pages)

        notifications = []
        for index, notification_data in enumerate(data.notifications):
            values = {key: notification_data[key] for key in NOTIFICATION_FIELDS if key in notification_data}
            values.setdefault("name", f"Notification {index + 1}")
            values.setdefault("sort_order", index)
            notifications.append(Notification(**values))
        form.notifications = notifications

        return form
