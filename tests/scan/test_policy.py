"""Tests for the exit policy."""

from __future__ import annotations

import pytest

from hookguard.scan.models import Finding, Severity
from hookguard.scan.policy import (
    EXIT_BLOCKED,
    EXIT_OK,
    Mode,
    decide_secrets,
    decide_security,
)

HIGH = Finding(id="private-key", severity=Severity.HIGH, title="t", detail="d")
MED = Finding(id="openai", severity=Severity.MED, title="t", detail="d")


class TestMode:
    """Tests for Mode.resolve."""

    @pytest.mark.parametrize("value", ["block", "BLOCK", " Block ", Mode.BLOCK])
    def test_block(self, value: object) -> None:
        """Block in any case resolves to block."""
        assert Mode.resolve(value) is Mode.BLOCK

    @pytest.mark.parametrize("value", ["warn", "strict", "", None, 2])
    def test_everything_else_warns(self, value: object) -> None:
        """Unknown values fall back to warn."""
        assert Mode.resolve(value) is Mode.WARN


class TestDecideSecrets:
    """Severity-gated blocking."""

    def test_block_med_only_passes(self) -> None:
        """MED findings never block."""
        assert decide_secrets("block", [MED]).exit_code == EXIT_OK

    def test_block_high_blocks(self) -> None:
        """A HIGH finding blocks in block mode."""
        decision = decide_secrets("block", [MED, HIGH])
        assert decision.blocked
        assert decision.exit_code == EXIT_BLOCKED == 2

    def test_warn_high_passes(self) -> None:
        """Warn mode never blocks."""
        assert decide_secrets("warn", [HIGH]).exit_code == EXIT_OK

    def test_no_findings(self) -> None:
        """Nothing found, nothing blocked."""
        assert not decide_secrets(Mode.BLOCK, []).blocked


class TestDecideSecurity:
    """Event-gated blocking."""

    def test_pre_tool_use_blocks(self) -> None:
        """Any finding blocks PreToolUse in block mode."""
        assert decide_security("block", "PreToolUse", [MED]).exit_code == EXIT_BLOCKED

    def test_permission_request_never_blocks(self) -> None:
        """PermissionRequest stays advisory even in block mode."""
        decision = decide_security("block", "PermissionRequest", [MED, HIGH])
        assert not decision.blocked
        assert decision.exit_code == EXIT_OK

    def test_warn_mode_passes(self) -> None:
        """Warn mode never blocks."""
        assert decide_security("warn", "PreToolUse", [HIGH]).exit_code == EXIT_OK

    def test_no_findings(self) -> None:
        """Block mode with nothing found passes."""
        assert decide_security("block", "PreToolUse", []).exit_code == EXIT_OK
