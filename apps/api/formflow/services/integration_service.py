"""Integration lookups for forms."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from formflow.db.enums import IntegrationKind
from formflow.db.models import FormIntegration, Integration as IntegrationModel
from formflow.services.integrations import Integration, build_integration

logger = logging.getLogger(__name__)


def to_instance(model: IntegrationModel, overrides: dict | None = None) -> Integration:
    """Build a runtime integration from its row, applying per-form overrides."""
    settings = dict(model.settings or {})
    settings.update(overrides or {})
    return build_integration(
        model.type,
        {
            "handle": model.handle,
            "name": model.name,
            "enabled": model.enabled,
            "settings": settings,
        },
    )


def get_enabled_integrations_for_form(db: Session, form) -> list[Integration]:
    """Enabled integrations attached to a form, in the form's order."""
    links = (
        db.query(FormIntegration)
        .join(IntegrationModel, FormIntegration.integration_id == IntegrationModel.id)
        .filter(
            FormIntegration.form_id == form.id,
            FormIntegration.enabled.is_(True),
            IntegrationModel.enabled.is_(True),
        )
        .order_by(FormIntegration.sort_order, FormIntegration.id)
        .all()
    )
    instances: list[Integration] = []
    for link in links:
        try:
            instances.append(to_instance(link.integration, link.settings))
        except ValueError:
            logger.warning("Skipping integration with unknown type %s", link.integration.type)
    return instances


def get_all_captchas(db: Session) -> list[IntegrationModel]:
    """Every configured captcha integration, enabled or not."""
    return (
        db.query(IntegrationModel)
        .filter(IntegrationModel.type == IntegrationKind.CAPTCHA.value)
        .order_by(IntegrationModel.handle)
        .all()
    )
