"""Unit tests for zone and scope resolution."""

from __future__ import annotations

import pytest
from pydantic import SecretStr

from sakpilot.core.exceptions import InvalidIdentifierError
from sakpilot.core.profiles import Profile
from sakpilot.core.zones import (
    FALLBACK_ZONE,
    RESOURCE_FAMILIES,
    BackendKind,
    ScopeKind,
    family_info,
    is_zone_scoped,
    list_zones,
    resolve_zone,
    validate_zone,
)


def _profile(zone: str = "") -> Profile:
    return Profile(name="p", access_token="t", access_token_secret=SecretStr("s"), default_zone=zone)


class TestFamilies:
    """Tests for family metadata."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "family", ["servers", "switches", "packet_filters", "disks", "archives", "databases"]
    )
    def test_zone_scoped_families(self, family: str) -> None:
        assert is_zone_scoped(family)

    @pytest.mark.unit
    @pytest.mark.parametrize("family", ["dns", "gslb", "proxy_lbs", "enhanced_dbs", "kms_keys"])
    def test_global_families(self, family: str) -> None:
        assert not is_zone_scoped(family)

    @pytest.mark.unit
    def test_family_backends(self) -> None:
        assert family_info("kms_keys").backend is BackendKind.KMS
        assert family_info("apprun").backend is BackendKind.APPRUN_DEDICATED
        assert family_info("registry_images").backend is BackendKind.REGISTRY

    @pytest.mark.unit
    def test_every_family_has_a_scope(self) -> None:
        assert all(isinstance(info.scope, ScopeKind) for info in RESOURCE_FAMILIES.values())

    @pytest.mark.unit
    def test_unknown_family(self) -> None:
        with pytest.raises(InvalidIdentifierError, match="resource family"):
            family_info("routers")


class TestResolveZone:
    """Tests for resolve_zone."""

    @pytest.mark.unit
    def test_explicit_zone_wins(self) -> None:
        assert resolve_zone("servers", "tk1a", _profile("is1b")) == "tk1a"

    @pytest.mark.unit
    def test_profile_zone_used(self) -> None:
        assert resolve_zone("servers", None, _profile("tk1b")) == "tk1b"

    @pytest.mark.unit
    def test_fallback_when_profile_has_no_zone(self) -> None:
        """A profile without a zone should resolve to is1a."""
        assert resolve_zone("servers", None, _profile("")) == FALLBACK_ZONE == "is1a"

    @pytest.mark.unit
    def test_fallback_without_profile(self) -> None:
        assert resolve_zone("disks", "", None, fallback_zone="tk1v") == "tk1v"

    @pytest.mark.unit
    def test_global_family_has_no_zone(self) -> None:
        assert resolve_zone("dns", "tk1a", _profile("tk1b")) is None

    @pytest.mark.unit
    def test_unknown_zone_rejected(self) -> None:
        with pytest.raises(InvalidIdentifierError, match="zone"):
            resolve_zone("servers", "mars1a", None)


class TestZones:
    """Tests for the zone list."""

    @pytest.mark.unit
    def test_list_zones_order(self) -> None:
        ids = [z.id for z in list_zones()]

        assert ids == ["is1a", "is1b", "tk1a", "tk1b", "tk1v"]

    @pytest.mark.unit
    def test_validate_zone(self) -> None:
        assert validate_zone("is1b") == "is1b"
        with pytest.raises(InvalidIdentifierError):
            validate_zone("")
