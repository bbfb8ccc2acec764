"""Tests for configuration, network tables and error types."""

import pytest

from splitswap.chains import (
    NATIVE_TOKEN_ADDRESS,
    NetworkConfig,
    get_liquidity_sources,
    get_network_config,
    get_supported_networks,
    require_network_config,
)
from splitswap.config import DEFAULT_PART_COUNT, RouteConfig, Settings
from splitswap.errors import (
    ServiceFetchError,
    SwapError,
    ThresholdFetchError,
    UnsupportedNetworkError,
    ValidationError,
    format_error,
)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.api_base_url == "https://api-public.bitzy.app"
        assert settings.default_part_count == 5
        assert settings.online_part_count is False
        assert settings.threshold_cache_ttl == 300

    def test_safe_dict_redacts_key(self):
        settings = Settings(_env_file=None, api_key="secret")
        safe = settings.get_safe_dict()

        assert safe["api_key"] == "***"
        assert "secret" not in str(safe)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ONLINE_PART_COUNT", "true")
        monkeypatch.setenv("FORCE_PART_COUNT", "3")

        settings = Settings(_env_file=None)
        assert settings.online_part_count is True
        assert settings.force_part_count == 3


class TestRouteConfig:
    """Tests for RouteConfig."""

    def test_from_settings(self):
        settings = Settings(_env_file=None, api_key="k", extra_headers={"X-A": "1"})
        config = RouteConfig.from_settings(settings)

        assert config.api_key == "k"
        assert config.headers == {"X-A": "1"}
        assert config.part_count_default == 5

    def test_merged_with(self):
        base = RouteConfig(api_base_url="https://a", api_key="k", headers={"X-A": "1"}, default_part_count=4)
        override = RouteConfig(api_key="other", headers={"X-B": "2"}, force_part_count=2)

        merged = override.merged_with(base)

        assert merged.api_base_url == "https://a"
        assert merged.api_key == "other"
        assert merged.headers == {"X-A": "1", "X-B": "2"}
        assert merged.default_part_count == 4
        assert merged.force_part_count == 2

    def test_merged_keeps_false(self):
        """An explicit False overrides the base."""
        merged = RouteConfig(online_part_count=False).merged_with(RouteConfig(online_part_count=True))
        assert merged.online_part_count is False

    def test_connection_key(self):
        a = RouteConfig(api_base_url="https://a", api_key="k")
        assert a.connection_key() == RouteConfig(api_base_url="https://a", api_key="k").connection_key()
        assert a.connection_key() != RouteConfig(api_base_url="https://a", api_key="x").connection_key()

    def test_part_count_default(self):
        assert RouteConfig().part_count_default == DEFAULT_PART_COUNT


class TestNetworks:
    """Tests for network tables."""

    def test_supported(self):
        assert get_supported_networks() == [3636, 3637]

    def test_mainnet(self):
        network = get_network_config(3637)

        assert network.wrapped_address == "0x0D2437F93Fed6EA64Ef01cCde385FB1263910C56"
        assert network.native_address == NATIVE_TOKEN_ADDRESS
        assert network.router_address is not None
        assert network.is_testnet is False

    def test_unknown(self):
        assert get_network_config(9999) is None
        with pytest.raises(UnsupportedNetworkError, match="Unsupported network: 9999"):
            require_network_config(9999)

    def test_custom_table(self):
        local = NetworkConfig(chain_id=31337, name="Local", wrapped_address="0x3333333333333333333333333333333333333333")

        assert require_network_config(31337, {31337: local}) is local
        with pytest.raises(UnsupportedNetworkError):
            require_network_config(3637, {31337: local})

    def test_liquidity_defaults(self):
        assert get_liquidity_sources(3637).types == [1, 2]
        assert get_liquidity_sources(1).enabled_sources == [1]


class TestErrors:
    """Tests for error types."""

    def test_hierarchy(self):
        assert issubclass(ValidationError, SwapError)
        assert issubclass(ThresholdFetchError, ServiceFetchError)

    def test_to_dict(self):
        error = ServiceFetchError("boom", status_code=503, url="https://x/y")

        assert error.to_dict() == {
            "code": "SERVICE_FETCH_ERROR",
            "message": "boom",
            "details": {"status_code": 503, "url": "https://x/y"},
        }

    @pytest.mark.parametrize(
        "error,expected",
        [
            ("plain", "plain"),
            (ValidationError("bad amount"), "bad amount"),
            ({"message": "from dict"}, "from dict"),
            ({"error": "from error key"}, "from error key"),
            (RuntimeError("runtime"), "runtime"),
            (RuntimeError(), "Unknown error occurred"),
            (None, "Unknown error occurred"),
            ({}, "Unknown error occurred"),
        ],
    )
    def test_format_error(self, error, expected):
        assert format_error(error) == expected
