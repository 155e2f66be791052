"""Tests for ProfileRenderer output formats."""
from __future__ import annotations

import json

import pytest

from mr3x_authz.facade import RolePermissionProfile, get_permissions_for_role
from mr3x_authz.report.renderer import ProfileRenderer


@pytest.fixture()
def renderer() -> ProfileRenderer:
    return ProfileRenderer()


@pytest.fixture()
def owner_profile() -> RolePermissionProfile:
    return get_permissions_for_role("PROPRIETARIO")


class TestRenderJson:
    def test_round_trips_profile_dict(
        self, renderer: ProfileRenderer, owner_profile: RolePermissionProfile
    ) -> None:
        assert json.loads(renderer.render_json(owner_profile)) == owner_profile.to_dict()

    def test_keeps_portuguese_text(
        self, renderer: ProfileRenderer, owner_profile: RolePermissionProfile
    ) -> None:
        assert "imobiliária" in renderer.render_json(owner_profile)

    def test_hierarchy_json(self, renderer: ProfileRenderer) -> None:
        payload = json.loads(renderer.render_hierarchy_json())
        assert len(payload) == 13
        ranks = [entry["rank"] for entry in payload]
        assert ranks == sorted(ranks, reverse=True)


class TestRenderTable:
    def test_lists_every_module(
        self, renderer: ProfileRenderer, owner_profile: RolePermissionProfile
    ) -> None:
        text = renderer.render_table(owner_profile)
        assert "ROLE PROFILE: PROPRIETARIO" in text
        for module in owner_profile.modules:
            assert module.value in text

    def test_unknown_role(self, renderer: ProfileRenderer) -> None:
        text = renderer.render_table(get_permissions_for_role("GHOST"))
        assert "ROLE PROFILE: UNKNOWN" in text
        assert "Rank          : -" in text


class TestRenderRich:
    def test_summary_sections(
        self, renderer: ProfileRenderer, owner_profile: RolePermissionProfile
    ) -> None:
        output = renderer.render_summary(owner_profile)
        assert "Role Profile" in output
        assert "Module Permissions" in output
        assert "Agreements" in output
        assert "PROPRIETARIO" in output

    def test_hierarchy(self, renderer: ProfileRenderer) -> None:
        output = renderer.render_hierarchy()
        assert "Role Hierarchy" in output
        assert output.index("CEO") < output.index("API_CLIENT")
