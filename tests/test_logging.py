"""
Tests for cartline logging helpers
"""

import logging

from cartline.logging import PACKAGE_LOGGER, get_logger, short_key


class TestGetLogger:
    """Tests for the package logger namespace."""

    def test_package_module_name_kept(self):
        assert get_logger("cartline.cart.service").name == "cartline.cart.service"

    def test_foreign_name_nested_under_package(self):
        """Test host modules share the package level and handler."""
        assert get_logger("shop.views").name == "cartline.shop.views"

    def test_loggers_are_cached(self):
        assert get_logger("cartline.cart.storage") is get_logger("cartline.cart.storage")

    def test_root_logger_left_alone(self):
        """Test the level is set on the package logger, not the root one."""
        package_logger = logging.getLogger(PACKAGE_LOGGER)

        assert package_logger.level != logging.NOTSET
        assert package_logger is not logging.getLogger()


class TestShortKey:
    """Tests for keys rendered into log lines."""

    def test_md5_key_is_shortened(self):
        assert short_key("0123456789abcdef0123456789abcdef") == "01234567"

    def test_newline_is_escaped(self):
        """Test a key cannot start a forged log line."""
        assert "\n" not in short_key("a\nFAKE")
        assert short_key("a\nFAKE") == "a\\nFAKE"

    def test_missing_key(self):
        assert short_key(None) == "N/A"
        assert short_key("") == "N/A"
