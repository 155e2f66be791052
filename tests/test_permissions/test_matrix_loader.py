"""Tests for MatrixLoader."""
from __future__ import annotations

import pathlib
import textwrap

import pytest

from mr3x_authz.permissions.matrix import (
    DEFAULT_RESTRICTION_MESSAGE,
    PermissionMatrix,
)
from mr3x_authz.permissions.matrix_loader import MatrixConfigError, MatrixLoader
from mr3x_authz.permissions.module_permission import (
    FULL_PERMISSIONS,
    RESTRICTED_DEFAULT,
    Module,
)
from mr3x_authz.roles.registry import Role

_VALID_CONFIG: dict[str, object] = {
    "version": "1.0",
    "roles": {
        "BROKER": {
            "agreements": {"view": True, "edit": True, "message": "Somente edição"},
        },
        "PROPRIETARIO": {
            "documents": {"view": True, "create": True},
        },
    },
}


@pytest.fixture()
def loader() -> MatrixLoader:
    return MatrixLoader()


@pytest.fixture()
def strict_loader() -> MatrixLoader:
    return MatrixLoader(strict=True)


# ---------------------------------------------------------------------------
# load_from_dict
# ---------------------------------------------------------------------------

class TestMatrixLoaderFromDict:
    def test_returns_permission_matrix(self, loader: MatrixLoader) -> None:
        assert isinstance(loader.load_from_dict(_VALID_CONFIG), PermissionMatrix)

    def test_entry_replaces_builtin(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict(_VALID_CONFIG)
        permission = matrix.get(Role.BROKER, Module.AGREEMENTS)
        assert permission.can_edit is True
        assert permission.can_sign is False
        assert permission.message == "Somente edição"

    def test_extend_keeps_other_builtin_entries(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict(_VALID_CONFIG)
        assert matrix.get(Role.PROPRIETARIO, "contracts").can_sign is False
        assert matrix.get(Role.PROPRIETARIO, "documents").can_create is True

    def test_extend_false_drops_builtins(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict({"extend": False, "roles": {}})
        assert matrix.get(Role.PROPRIETARIO, "contracts") == RESTRICTED_DEFAULT
        assert matrix.get(Role.INQUILINO, "properties") == FULL_PERMISSIONS
        assert matrix.restriction_message("properties") == DEFAULT_RESTRICTION_MESSAGE

    def test_custom_messages_and_default(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict(
            {
                "default_message": "Fale com a imobiliária",
                "messages": {"documents": "Documentos são emitidos pela imobiliária"},
            }
        )
        assert matrix.restriction_message("documents") == "Documentos são emitidos pela imobiliária"
        assert matrix.restriction_message("dashboard") == "Fale com a imobiliária"
        assert matrix.restriction_message("properties") == "Imóveis são gerenciados pela imobiliária"

    def test_restricted_roles_override(self, loader: MatrixLoader) -> None:
        matrix = loader.load_from_dict({"extend": False, "restricted_roles": ["INQUILINO"]})
        assert matrix.get(Role.INQUILINO, "payments") == RESTRICTED_DEFAULT
        assert matrix.get(Role.PROPRIETARIO, "payments") == FULL_PERMISSIONS

    def test_numeric_version_accepted(self, loader: MatrixLoader) -> None:
        assert isinstance(loader.load_from_dict({"version": 1}), PermissionMatrix)

    def test_unsupported_version_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="version"):
            loader.load_from_dict({"version": "2.0"})

    def test_unknown_role_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError):
            loader.load_from_dict({"roles": {"GHOST": {"dashboard": {"view": True}}}})

    def test_unknown_module_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError):
            loader.load_from_dict({"roles": {"BROKER": {"spaceships": {"view": True}}}})

    def test_unknown_entry_key_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError):
            loader.load_from_dict({"roles": {"BROKER": {"chat": {"fly": True}}}})

    def test_roles_must_be_mapping(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="roles"):
            loader.load_from_dict({"roles": ["BROKER"]})

    def test_non_dict_raises(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError):
            loader.load_from_dict(["not", "a", "dict"])  # type: ignore[arg-type]

    def test_error_carries_config_path(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError) as exc_info:
            loader.load_from_dict({"version": "9"}, config_path="custom.yaml")
        assert exc_info.value.config_path == "custom.yaml"
        assert "[custom.yaml]" in str(exc_info.value)


class TestStrictMode:
    def test_unknown_top_key_rejected(self, strict_loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="Unknown top-level keys"):
            strict_loader.load_from_dict({"roles": {}, "surprise": 1})

    def test_unknown_top_key_ignored_when_lenient(self, loader: MatrixLoader) -> None:
        assert isinstance(loader.load_from_dict({"roles": {}, "surprise": 1}), PermissionMatrix)


# ---------------------------------------------------------------------------
# YAML sources
# ---------------------------------------------------------------------------

class TestYamlSources:
    def test_load_from_yaml_string(self, loader: MatrixLoader) -> None:
        text = textwrap.dedent(
            """\
            version: "1"
            roles:
              INQUILINO:
                properties:
                  view: true
                  create: true
            """
        )
        matrix = loader.load_from_yaml_string(text)
        assert matrix.action_allowed("INQUILINO", "properties", "create").allowed is True

    def test_invalid_yaml_string(self, loader: MatrixLoader) -> None:
        with pytest.raises(MatrixConfigError, match="parse"):
            loader.load_from_yaml_string("roles: [unclosed")

    def test_load_file(self, loader: MatrixLoader, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "matrix.yaml"
        path.write_text(
            "roles:\n  BROKER:\n    agreements:\n      view: true\n      delete: true\n",
            encoding="utf-8",
        )
        matrix = loader.load(path)
        assert matrix.get("BROKER", "agreements").can_delete is True

    def test_load_empty_file_uses_builtins(self, loader: MatrixLoader, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        matrix = loader.load(path)
        assert matrix.get("PROPRIETARIO", "contracts").can_sign is False

    def test_missing_file_raises(self, loader: MatrixLoader, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "missing.yaml")

    def test_bad_yaml_file(self, loader: MatrixLoader, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("roles: {broken", encoding="utf-8")
        with pytest.raises(MatrixConfigError) as exc_info:
            loader.load(path)
        assert exc_info.value.config_path == str(path)
