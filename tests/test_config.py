"""
Tests for config loading and the typed loader.
"""

import textwrap
from dataclasses import dataclass, field
from typing import List, Literal, Optional

import pytest

from ctxweaver.config import (
    CarrierDef,
    CarriersCfg,
    Config,
    FunctionsCfg,
    load_config,
)
from ctxweaver.config.typed import ConfigLoadError, load_typed
from ctxweaver.errors import ConfigError, CtxWeaverUserError
from .infrastructure import write


def cfg_file(tmp_path, text: str):
    return write(tmp_path / "ctxweaver.yaml", textwrap.dedent(text).lstrip())


class TestLoadConfig:

    def test_minimal(self, tmp_path):
        cfg = load_config(cfg_file(tmp_path, '''
            template: "defer trace({{ ctx }})"
        '''))
        assert cfg.template_text == "defer trace({{ ctx }})"
        assert cfg.imports == []
        assert cfg.test is False and cfg.mark_generated is False
        assert cfg.carriers_cfg.default is True
        assert cfg.functions.types == ["function", "method"]
        assert cfg.functions.scopes == ["exported", "unexported"]
        assert cfg.hooks.pre == [] and cfg.hooks.post == []

    def test_full(self, tmp_path):
        cfg = load_config(cfg_file(tmp_path, '''
            template: |
              defer trace.Start({{ ctx }}, {{ func_name | quote }}).End()
            imports:
              - github.com/example/trace
            carriers:
              custom:
                - package: example.com/rpc
                  type: Call
                  accessor: .Ctx()
              default: false
            packages:
              patterns: ["./..."]
              regexps:
                only: ["^example\\\\.com/"]
                omit: ["/mock"]
            functions:
              types: [method]
              scopes: [exported]
              regexps:
                omit: ["^Test"]
            test: true
            mark_generated: true
            hooks:
              pre: ["go mod tidy"]
              post: ["gofmt -l ."]
        '''))
        assert cfg.imports == ["github.com/example/trace"]
        assert cfg.carriers_cfg == CarriersCfg(custom=[CarrierDef("example.com/rpc", "Call", ".Ctx()")], default=False)
        assert cfg.packages.patterns == ["./..."]
        assert cfg.packages.regexps.only == ["^example\\.com/"]
        assert cfg.functions == FunctionsCfg(types=["method"], scopes=["exported"], regexps=cfg.functions.regexps)
        assert cfg.functions.regexps.omit == ["^Test"]
        assert cfg.test is True and cfg.mark_generated is True
        assert cfg.hooks.pre == ["go mod tidy"]

    def test_carriers_list_form_keeps_defaults(self, tmp_path):
        cfg = load_config(cfg_file(tmp_path, '''
            template: "trace({{ ctx }})"
            carriers:
              - package: example.com/rpc
                type: Call
        '''))
        assert cfg.carriers_cfg.default is True
        assert cfg.carriers_cfg.custom == [CarrierDef("example.com/rpc", "Call")]

    def test_template_file_relative_to_config(self, tmp_path):
        write(tmp_path / "conf" / "trace.tmpl", "defer trace({{ ctx }})\n")
        path = write(tmp_path / "conf" / "ctxweaver.yaml", "template:\n  file: trace.tmpl\n")

        cfg = load_config(path)

        assert cfg.template_text == "defer trace({{ ctx }})\n"
        assert cfg.template_path == str((tmp_path / "conf" / "trace.tmpl").resolve())

    def test_missing_template_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Template file not found"):
            load_config(cfg_file(tmp_path, "template: {file: nope.tmpl}\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(cfg_file(tmp_path, "template: [unclosed\n"))

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            load_config(cfg_file(tmp_path, "- a\n- b\n"))

    def test_template_required(self, tmp_path):
        with pytest.raises(ConfigError, match=r"\$\.template: required field missing"):
            load_config(cfg_file(tmp_path, "imports: []\n"))

    def test_unknown_key(self, tmp_path):
        with pytest.raises(ConfigError, match="unknown key"):
            load_config(cfg_file(tmp_path, 'template: "x()"\nimport: [a]\n'))

    def test_invalid_function_type(self, tmp_path):
        with pytest.raises(ConfigError, match=r"\$\.functions\.types\[0\]"):
            load_config(cfg_file(tmp_path, 'template: "x()"\nfunctions: {types: [closure]}\n'))

    def test_invalid_regexp(self, tmp_path):
        with pytest.raises(ConfigError, match=r"functions\.regexps\.only\[0\]"):
            load_config(cfg_file(tmp_path, 'template: "x()"\nfunctions: {regexps: {only: ["("]}}\n'))

    def test_empty_carrier_type(self, tmp_path):
        with pytest.raises(ConfigError, match=r"carriers\[0\]\.type"):
            load_config(cfg_file(tmp_path, '''
                template: "x()"
                carriers:
                  - package: example.com/rpc
                    type: ""
            '''))

    def test_config_errors_are_user_errors(self, tmp_path):
        with pytest.raises(CtxWeaverUserError):
            load_config(tmp_path / "absent.yaml")

    def test_unresolved_template_file(self):
        from ctxweaver.config import TemplateFileCfg
        with pytest.raises(RuntimeError):
            _ = Config(template=TemplateFileCfg("x.tmpl")).template_text


@dataclass
class _Inner:
    name: str
    kind: Literal["a", "b"] = "a"


@dataclass
class _Outer:
    items: List[_Inner] = field(default_factory=list)
    limit: Optional[int] = None
    flag: bool = False


class TestTypedLoader:

    def test_nested(self):
        out = load_typed(_Outer, {"items": [{"name": "x", "kind": "b"}], "limit": 3})
        assert out.items == [_Inner("x", "b")]
        assert out.limit == 3

    def test_none_means_defaults(self):
        assert load_typed(_Outer, None) == _Outer()

    def test_error_path(self):
        with pytest.raises(ConfigLoadError, match=r"\$\.items\[1\]\.kind"):
            load_typed(_Outer, {"items": [{"name": "x"}, {"name": "y", "kind": "c"}]})

    def test_bool_is_not_int(self):
        with pytest.raises(ConfigLoadError):
            load_typed(_Outer, {"limit": True})
        with pytest.raises(ConfigLoadError):
            load_typed(_Outer, {"flag": 1})

    def test_unknown_nested_key(self):
        with pytest.raises(ConfigLoadError, match=r"\$\.items\[0\]: unknown key"):
            load_typed(_Outer, {"items": [{"name": "x", "extra": 1}]})


    def test_unsupported_annotation(self):
        class Plain:
            pass

        with pytest.raises(ConfigLoadError, match=r"\$\.x: unsupported annotation Plain"):
            load_typed(Plain, {}, path="$.x")
