import importlib
import sys

from linkrelay.core.relay import credentials as creds
from linkrelay.core.relay.types import Credentials

SCRIPT = """
var _0x1a2b = function () {
  return fetch(target, {
    method: "POST",
    body: JSON.stringify({ v: 12, u: 'user-42', file: name, token: "abc.def-ghi" }),
  });
};
"""


def test_extract_credentials_from_script_text():
    assert creds.extract_credentials(SCRIPT) == Credentials(
        token="abc.def-ghi", user_id="user-42", version=12
    )


def test_extract_credentials_requires_all_three():
    assert creds.extract_credentials("token: 'abc', u: 'x'") is None
    assert creds.extract_credentials("u: 'x', v: 3") is None
    assert creds.extract_credentials("token: 'abc', v: 3") is None


def test_script_supplier_reads_file(tmp_path):
    path = tmp_path / "deobfuscated.js"
    path.write_text(SCRIPT, encoding="utf-8")
    got = creds.ScriptCredentialsSupplier(path).supply()
    assert got is not None
    assert got.version == 12


def test_script_supplier_missing_file_returns_none(tmp_path):
    assert creds.ScriptCredentialsSupplier(tmp_path / "nope.js").supply() is None


def test_script_supplier_without_patterns_returns_none(tmp_path):
    path = tmp_path / "empty.js"
    path.write_text("console.log('hi')", encoding="utf-8")
    assert creds.ScriptCredentialsSupplier(path).supply() is None


def test_static_supplier():
    got = creds.StaticCredentialsSupplier("t", "u", "5").supply()
    assert got == Credentials(token="t", user_id="u", version=5)


def test_static_supplier_rejects_bad_values():
    assert creds.StaticCredentialsSupplier("t", "u", "five").supply() is None
    assert creds.StaticCredentialsSupplier("", "u", 1).supply() is None


def test_load_credentials_never_raises():
    class _Broken:
        def supply(self):
            raise RuntimeError("disk on fire")

    assert creds.load_credentials(_Broken()) is None


def test_load_credentials_returns_supplied_value():
    value = Credentials(token="t", user_id="u", version=1)

    class _Fixed:
        def supply(self):
            return value

    assert creds.load_credentials(_Fixed()) is value


def _fresh_credentials_module():
    import linkrelay

    for m in ("linkrelay.config", "linkrelay.core.relay.credentials"):
        sys.modules.pop(m, None)
    # `from linkrelay import config` reads the package attribute first.
    if hasattr(linkrelay, "config"):
        delattr(linkrelay, "config")
    return importlib.import_module("linkrelay.core.relay.credentials")


def test_supplier_from_config_prefers_static_values(monkeypatch):
    monkeypatch.setenv("RELAY_TOKEN", "tok")
    monkeypatch.setenv("RELAY_USER_ID", "uid")
    monkeypatch.setenv("RELAY_VERSION", "9")
    mod = _fresh_credentials_module()
    supplier = mod.supplier_from_config()
    assert isinstance(supplier, mod.StaticCredentialsSupplier)
    assert supplier.supply().version == 9


def test_supplier_from_config_falls_back_to_script(monkeypatch, tmp_path):
    for var in ("RELAY_TOKEN", "RELAY_USER_ID", "RELAY_VERSION"):
        monkeypatch.delenv(var, raising=False)
    script = tmp_path / "creds.js"
    script.write_text(SCRIPT, encoding="utf-8")
    monkeypatch.setenv("RELAY_CREDENTIALS_SCRIPT", str(script))
    mod = _fresh_credentials_module()
    supplier = mod.supplier_from_config()
    assert isinstance(supplier, mod.ScriptCredentialsSupplier)
    assert supplier.path == script
    assert supplier.supply().user_id == "user-42"
