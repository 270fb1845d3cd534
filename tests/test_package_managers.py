"""
Tests for the package manager registry (debup/package_managers.py).
"""

from unittest.mock import patch

import pytest

from conftest import which_from
from debup.package_managers import (
    CATEGORIES,
    PACKAGE_MANAGERS,
    PackageManager,
    get_available_package_managers,
    get_package_manager,
)


class TestPackageManager:
    """Tests for PackageManager dataclass."""

    def test_is_available(self):
        pm = PackageManager(name="flatpak", display_name="Flatpak", executable="flatpak", category="universal")
        with patch("debup.package_managers.shutil.which", return_value="/usr/bin/flatpak"):
            assert pm.is_available() is True
            assert pm.which() == "/usr/bin/flatpak"

    def test_is_not_available(self):
        pm = PackageManager(name="x", display_name="X", executable="nonexistent_command_12345", category="toolchain")
        assert pm.is_available() is False

    def test_availability_not_cached(self):
        """Each probe looks at PATH again."""
        pm = get_package_manager("go")
        with patch("debup.package_managers.shutil.which", return_value=None):
            assert pm.is_available() is False
        with patch("debup.package_managers.shutil.which", return_value="/usr/local/go/bin/go"):
            assert pm.is_available() is True


class TestRegistry:
    """Tests for the registry contents."""

    def test_categories(self):
        for pm in PACKAGE_MANAGERS:
            assert pm.category in CATEGORIES

    def test_commands(self):
        assert get_package_manager("apt").update_command == ("apt", "upgrade", "-y")
        assert get_package_manager("apt").requires_sudo is True
        assert get_package_manager("flatpak").check_command == ("flatpak", "remote-ls", "--updates")
        assert get_package_manager("flatpak").update_command == ("flatpak", "update", "-y")
        assert get_package_manager("rustup").check_command == ("rustup", "check")
        assert get_package_manager("cargo").check_command == ("cargo", "install", "--list")

    def test_unknown(self):
        with pytest.raises(KeyError):
            get_package_manager("pacman")


class TestGetAvailablePackageManagers:
    """Tests for availability filtering."""

    def test_by_category(self):
        with patch("debup.package_managers.shutil.which", side_effect=which_from("apt", "rustup", "go")):
            names = [pm.name for pm in get_available_package_managers("toolchain")]
        assert names == ["rustup", "go"]

    def test_all(self):
        with patch("debup.package_managers.shutil.which", side_effect=which_from("apt", "flatpak")):
            names = [pm.name for pm in get_available_package_managers()]
        assert names == ["apt", "flatpak"]

    def test_invalid_category(self):
        with pytest.raises(ValueError, match="Invalid category"):
            get_available_package_managers("language")
