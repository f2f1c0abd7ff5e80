from config import MAX_GST_RATE, Settings, get_settings


def test_defaults(monkeypatch):
    for key in ["SHOP_NAME", "SHOP_GSTIN", "SHOP_STATE", "SHOP_ADDRESS", "CURRENCY_SYMBOL", "HSN_CSV_PATH"]:
        monkeypatch.delenv(key, raising=False)

    settings = Settings(_env_file=None)

    assert MAX_GST_RATE == 28
    assert settings.shop_state == "Maharashtra"
    assert settings.currency_symbol == "₹"
    assert settings.shop_info["gstin"] == "27ABCDE1234F1Z5"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SHOP_STATE", "Goa")
    monkeypatch.setenv("HSN_CSV_PATH", "/tmp/hsn.csv")

    settings = Settings(_env_file=None)

    assert settings.shop_info["state"] == "Goa"
    assert settings.hsn_csv_path == "/tmp/hsn.csv"


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
