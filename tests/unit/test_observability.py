from memory_server import observability


def test_configure_logfire_disabled_keeps_spans_local(monkeypatch):
    calls = []
    monkeypatch.setattr(observability.logfire, "configure", lambda **kwargs: calls.append(kwargs))

    assert observability.configure_logfire(False) is False
    assert calls == [{"send_to_logfire": False, "console": False}]


def test_configure_logfire_enabled_instruments_mcp(monkeypatch):
    calls = []
    monkeypatch.setattr(observability.logfire, "configure", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setattr(observability.logfire, "instrument_mcp", lambda: calls.append("mcp"))

    assert observability.configure_logfire(True) is True
    assert calls[0]["service_name"] == "memory-server"
    assert calls[0]["send_to_logfire"] == "if-token-present"
    assert calls[1] == "mcp"


def test_configure_logfire_tolerates_missing_mcp_instrumentation(monkeypatch):
    def unavailable():
        raise RuntimeError("mcp instrumentation requires opentelemetry extras")

    monkeypatch.setattr(observability.logfire, "configure", lambda **kwargs: None)
    monkeypatch.setattr(observability.logfire, "instrument_mcp", unavailable)

    assert observability.configure_logfire(True) is True


def test_dispatch_span_raises_no_unconfigured_warning(dispatcher):
    import warnings

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        dispatcher.dispatch("list_tags", {"user_id": "u1"})

    assert not [w for w in caught if w.category.__name__ == "LogfireNotConfiguredWarning"]
