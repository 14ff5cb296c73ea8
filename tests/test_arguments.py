"""Tests for argument vector construction."""

import pytest

from terrarun.core import (
    CommandOptions,
    Operation,
    TerraformFlags,
    TerraformOptions,
    UnsupportedOperationError,
    build_arguments,
    rewrite_module_source,
)
from terrarun.security import SecurityError


def _pairs(args, option):
    """Collect the values following each occurrence of option."""
    return {args[i + 1] for i, arg in enumerate(args) if arg == option}


# ---------------------------------------------------------------------------
# Operation parsing
# ---------------------------------------------------------------------------

class TestOperationParse:
    def test_parse_string(self):
        assert Operation.parse("state-list") is Operation.STATE_LIST

    def test_parse_member(self):
        assert Operation.parse(Operation.APPLY) is Operation.APPLY

    def test_parse_unknown(self):
        with pytest.raises(UnsupportedOperationError) as exc_info:
            Operation.parse("import")
        assert exc_info.value.operation == "import"

    @pytest.mark.parametrize("bad", ["", "validate", "state list", "APPLY", None])
    def test_build_rejects_unsupported(self, bad):
        with pytest.raises(UnsupportedOperationError):
            build_arguments(bad, CommandOptions(inputs={"a": "b"}))


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

class TestInit:
    def test_init_bare(self):
        assert build_arguments(Operation.INIT) == ["init"]

    def test_init_backend_config(self):
        args = build_arguments("init", CommandOptions(
            backend_config={"bucket": "tf-state", "region": "eu-west-1"},
        ))
        assert args[0] == "init"
        assert args.count("-backend-config") == 2
        assert _pairs(args, "-backend-config") == {"bucket=tf-state", "region=eu-west-1"}

    def test_init_force_copy(self):
        args = build_arguments("init", CommandOptions(flags=TerraformFlags(force_copy=True)))
        assert args == ["init", "-force-copy"]

    def test_init_force_copy_off(self):
        args = build_arguments("init", CommandOptions(flags=TerraformFlags()))
        assert args == ["init"]

    def test_init_from_module(self):
        args = build_arguments("init", CommandOptions(
            options=TerraformOptions(from_module=True),
            module="git@github.com:org/repo.git",
        ))
        idx = args.index("-from-module")
        assert args[idx + 1] == "github.com/org/repo"

    def test_init_from_module_without_module(self):
        with pytest.raises(ValueError):
            build_arguments("init", CommandOptions(options=TerraformOptions(from_module=True)))

    def test_init_category_order(self):
        args = build_arguments("init", CommandOptions(
            backend_config={"key": "state.tfstate"},
            flags=TerraformFlags(force_copy=True),
            options=TerraformOptions(from_module=True),
            module="https://github.com/org/repo.git",
        ))
        assert args == [
            "init",
            "-backend-config", "key=state.tfstate",
            "-force-copy",
            "-from-module", "github.com/org/repo",
        ]

    def test_init_ignores_inputs(self):
        args = build_arguments("init", CommandOptions(inputs={"region": "us-east-1"}))
        assert "-var" not in args

    def test_init_rejects_bad_backend_key(self):
        with pytest.raises(SecurityError):
            build_arguments("init", CommandOptions(backend_config={"bad key": "v"}))


# ---------------------------------------------------------------------------
# apply / plan / destroy
# ---------------------------------------------------------------------------

class TestVariableOperations:
    def test_apply_with_input(self):
        args = build_arguments("apply", CommandOptions(inputs={"str": "foo"}))
        assert args == ["apply", "-auto-approve", "-var", "str=foo"]

    @pytest.mark.parametrize("op", ["apply", "plan", "destroy"])
    def test_auto_approve_always(self, op):
        assert build_arguments(op) == [op, "-auto-approve"]

    def test_multiple_inputs(self):
        args = build_arguments("plan", CommandOptions(inputs={"a": "1", "b": "2"}))
        assert args[:2] == ["plan", "-auto-approve"]
        assert args.count("-var") == 2
        assert _pairs(args, "-var") == {"a=1", "b=2"}

    def test_values_are_human_readable(self):
        args = build_arguments("apply", CommandOptions(inputs={
            "num": 255,
            "ratio": 0.5,
            "enabled": True,
            "zones": ["a", "b"],
            "tags": {"env": "dev"},
        }))
        assert _pairs(args, "-var") == {
            "num=255",
            "ratio=0.5",
            "enabled=true",
            'zones=["a", "b"]',
            'tags={"env": "dev"}',
        }

    def test_backend_config_not_used(self):
        args = build_arguments("apply", CommandOptions(backend_config={"bucket": "x"}))
        assert "-backend-config" not in args

    def test_rejects_bad_variable_name(self):
        with pytest.raises(SecurityError):
            build_arguments("apply", CommandOptions(inputs={"1bad": "x"}))

    def test_values_with_punctuation(self):
        args = build_arguments("apply", CommandOptions(inputs={
            "password": "p$ssw0rd",
            "path": "C:\\tf\\state",
            "greeting": 'say "hi"',
        }))
        assert _pairs(args, "-var") == {
            "password=p$ssw0rd",
            "path=C:\\tf\\state",
            'greeting=say "hi"',
        }

    def test_backend_value_with_punctuation(self):
        args = build_arguments("init", CommandOptions(backend_config={"conn_str": "postgres://u:p$w@db/tf"}))
        assert args == ["init", "-backend-config", "conn_str=postgres://u:p$w@db/tf"]

    def test_rejects_null_byte_value(self):
        with pytest.raises(SecurityError):
            build_arguments("destroy", CommandOptions(inputs={"name": "x\x00y"}))

    def test_deterministic(self):
        opts = CommandOptions(inputs={"str": "foo", "num": 2})
        assert build_arguments("apply", opts) == build_arguments("apply", opts)


# ---------------------------------------------------------------------------
# Read-only and targeted operations
# ---------------------------------------------------------------------------

class TestOtherOperations:
    def test_output(self):
        assert build_arguments("output", CommandOptions(inputs={"a": "b"})) == ["output", "-json"]

    def test_show(self):
        assert build_arguments(Operation.SHOW) == ["show", "-json"]

    def test_state_list(self):
        assert build_arguments("state-list") == ["state", "list"]

    def test_state_show(self):
        args = build_arguments("state-show", CommandOptions(target="aws_instance.web"))
        assert args == ["state", "show", "aws_instance.web"]

    @pytest.mark.parametrize("op", ["taint", "untaint"])
    def test_taint_untaint(self, op):
        args = build_arguments(op, CommandOptions(
            target='module.app.null_resource.obj["a"]',
            inputs={"ignored": "x"},
        ))
        assert args == [op, 'module.app.null_resource.obj["a"]']

    @pytest.mark.parametrize("target", ["", "$(whoami)", "a b"])
    def test_rejects_bad_target(self, target):
        with pytest.raises(SecurityError):
            build_arguments("taint", CommandOptions(target=target))


# ---------------------------------------------------------------------------
# Module source rewriting
# ---------------------------------------------------------------------------

class TestRewriteModuleSource:
    @pytest.mark.parametrize("source,expected", [
        ("git@github.com:org/repo.git", "github.com/org/repo"),
        ("https://github.com/org/repo.git", "github.com/org/repo"),
        ("https://github.com/org/repo", "github.com/org/repo"),
        ("github.com/org/repo", "github.com/org/repo"),
    ])
    def test_rewrite(self, source, expected):
        assert rewrite_module_source(source) == expected

    @pytest.mark.parametrize("source", [
        "git@github.com:org/repo.git",
        "https://github.com/ishansd94/terraform-sample-module.git",
        "git@gitlab.com:group/sub/module.git",
    ])
    def test_idempotent(self, source):
        once = rewrite_module_source(source)
        assert rewrite_module_source(once) == once

    def test_only_trailing_git_removed(self):
        assert rewrite_module_source("git@host:org/my.gitops.git") == "host/org/my.gitops"

    @pytest.mark.parametrize("source,expected", [
        ("git@git@host:o/r.git", "host/o/r"),
        ("host/o/r.git.git", "host/o/r"),
        ("https://git@github.com/org/repo.git", "github.com/org/repo"),
        ("git@https://host/o/r", "host/o/r"),
    ])
    def test_repeated_prefixes_and_suffixes(self, source, expected):
        once = rewrite_module_source(source)
        assert once == expected
        assert rewrite_module_source(once) == once
