"""Composition root: build the token stack and application services once per app."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import cast

from flask import Flask, current_app

from portfolio.infra.jwt.pyjwt_token_provider import PyJWTTokenProvider
from portfolio.infra.sqlalchemy.user_store import SQLAlchemyUserStore
from portfolio.services.authentication.service import AuthenticationService
from portfolio.services.messages.service import MessageService
from portfolio.services.profile.service import ProfileService
from portfolio.services.resources.service import (
    EducationService,
    ExperienceService,
    ProjectService,
    SkillService,
    SocialLinkService,
)
from portfolio.services.tokens.dto import JwtSettings
from portfolio.services.tokens.service import JwtTokenService

EXTENSION_KEY = "portfolio.services"

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ServiceContainer:
    """Every application service, wired to one token service."""

    tokens: JwtTokenService
    auth: AuthenticationService
    profile: ProfileService
    educations: EducationService
    experiences: ExperienceService
    projects: ProjectService
    skills: SkillService
    social_links: SocialLinkService
    messages: MessageService


def build_services(config) -> ServiceContainer:
    """
    Construct the service graph from a Flask config mapping.

    Nothing here touches the database; adapters open units of work lazily.
    """
    settings = JwtSettings.from_config(config)
    if not settings.is_configured:
        log.warning("JWT_SECRET_KEY is empty; token issuance will fail until it is set.")

    tokens = JwtTokenService(
        settings,
        SQLAlchemyUserStore(logger=logging.getLogger("portfolio.user_store")),
        PyJWTTokenProvider(settings),
        logger=logging.getLogger("portfolio.tokens"),
    )
    return ServiceContainer(
        tokens=tokens,
        auth=AuthenticationService(
            tokens=tokens, default_role=config.get("DEFAULT_USER_ROLE", "User")
        ),
        profile=ProfileService(tokens=tokens),
        educations=EducationService(tokens=tokens),
        experiences=ExperienceService(tokens=tokens),
        projects=ProjectService(tokens=tokens),
        skills=SkillService(tokens=tokens),
        social_links=SocialLinkService(tokens=tokens),
        messages=MessageService(tokens=tokens),
    )


def init_app(app: Flask) -> None:
    app.extensions[EXTENSION_KEY] = build_services(app.config)


def get_services() -> ServiceContainer:
    """Return the container of the current application."""
    return cast(ServiceContainer, current_app.extensions[EXTENSION_KEY])
