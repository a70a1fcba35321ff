"""Curated detection rules.

Three registries exist:

- PAYLOAD_RULES: secret patterns checked on every hook payload. Kept small
  because it runs on each tool call.
- FILE_RULES: superset used for the opt-in staged-file scan on git commit.
- RISK_RULES: risky shell idioms for the security hook, matched
  case-insensitively.

Rules prefer literal prefixes and format markers over entropy heuristics.
Registry order matters: detection keeps the first finding per rule id.
"""

from __future__ import annotations

import re

from hookguard.scan.models import PatternRule, Severity

# Token rules use ASCII word boundaries: a token glued to non-ASCII text still matches
_A = re.ASCII

PRIVATE_KEY_DETAIL = "Detected a private key header (BEGIN ... PRIVATE KEY)."

PAYLOAD_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="private-key",
        pattern=re.compile(r"-----BEGIN (RSA|OPENSSH|EC|PGP) PRIVATE KEY-----"),
        severity=Severity.HIGH,
        title="Private key material",
        detail=PRIVATE_KEY_DETAIL,
    ),
    PatternRule(
        id="openai",
        pattern=re.compile(r"\bsk-[A-Za-z0-9]{20,}\b", _A),
        severity=Severity.MED,
        title="OpenAI API key-like token",
        detail="Detected token matching sk-... pattern.",
    ),
    PatternRule(
        id="github",
        pattern=re.compile(r"\b(ghp_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})\b", _A),
        severity=Severity.MED,
        title="GitHub token-like secret",
        detail="Detected GitHub token pattern (ghp_ / github_pat_).",
    ),
    PatternRule(
        id="aws-akid",
        pattern=re.compile(r"\bAKIA[0-9A-Z]{16}\b", _A),
        severity=Severity.MED,
        title="AWS Access Key ID-like token",
        detail="Detected AWS access key id pattern (AKIA...).",
    ),
    PatternRule(
        id="slack",
        pattern=re.compile(r"\bxox[baprs]-[A-Za-z0-9-]{10,}\b", _A),
        severity=Severity.MED,
        title="Slack token-like secret",
        detail="Detected Slack token pattern (xox*).",
    ),
)

FILE_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="private-key",
        pattern=re.compile(
            r"-----BEGIN (RSA|OPENSSH|EC|PGP|DSA|ENCRYPTED) PRIVATE KEY-----"
        ),
        severity=Severity.HIGH,
        title="Private key material",
        detail=PRIVATE_KEY_DETAIL,
    ),
    PatternRule(
        id="openai",
        pattern=re.compile(r"\bsk-[A-Za-z0-9]{20,}\b", _A),
        severity=Severity.MED,
        title="OpenAI API key-like token",
        detail="Detected token matching sk-... pattern.",
    ),
    PatternRule(
        id="github",
        pattern=re.compile(
            r"\b(ghp_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,}"
            r"|gho_[A-Za-z0-9]{20,}|ghu_[A-Za-z0-9]{20,}"
            r"|ghs_[A-Za-z0-9]{20,}|ghr_[A-Za-z0-9]{20,})\b",
            _A,
        ),
        severity=Severity.MED,
        title="GitHub token-like secret",
        detail="Detected GitHub token pattern.",
    ),
    PatternRule(
        id="aws-akid",
        pattern=re.compile(r"\bAKIA[0-9A-Z]{16}\b", _A),
        severity=Severity.MED,
        title="AWS Access Key ID",
        detail="Detected AWS access key id pattern (AKIA...).",
    ),
    PatternRule(
        id="slack",
        pattern=re.compile(r"\bxox[baprs]-[A-Za-z0-9-]{10,}\b", _A),
        severity=Severity.MED,
        title="Slack token",
        detail="Detected Slack token pattern (xox*).",
    ),
    PatternRule(
        id="google-api",
        pattern=re.compile(r"\bAIza[A-Za-z0-9_-]{35}\b", _A),
        severity=Severity.MED,
        title="Google API key",
        detail="Detected Google API key pattern (AIza...).",
    ),
    PatternRule(
        id="stripe-secret",
        pattern=re.compile(r"\b[sr]k_live_[A-Za-z0-9]{20,}\b", _A),
        severity=Severity.MED,
        title="Stripe secret/restricted key",
        detail="Detected Stripe live secret key (sk_live_ / rk_live_).",
    ),
    PatternRule(
        id="twilio",
        pattern=re.compile(r"\bSK[a-f0-9]{32}\b", _A),
        severity=Severity.MED,
        title="Twilio API key",
        detail="Detected Twilio API key pattern (SK + 32 hex).",
    ),
    PatternRule(
        id="sendgrid",
        pattern=re.compile(r"\bSG\.[A-Za-z0-9_-]{22,}\.[A-Za-z0-9_-]{22,}\b", _A),
        severity=Severity.MED,
        title="SendGrid API key",
        detail="Detected SendGrid API key pattern (SG.xxx.xxx).",
    ),
    PatternRule(
        id="npm-token",
        pattern=re.compile(r"\bnpm_[A-Za-z0-9]{36}\b", _A),
        severity=Severity.MED,
        title="npm access token",
        detail="Detected npm token pattern (npm_...).",
    ),
    PatternRule(
        id="pypi-token",
        pattern=re.compile(r"\bpypi-[A-Za-z0-9_-]{50,}\b", _A),
        severity=Severity.MED,
        title="PyPI API token",
        detail="Detected PyPI token pattern (pypi-...).",
    ),
    PatternRule(
        id="database-url",
        pattern=re.compile(
            r"\b(postgres|mysql|mongodb(\+srv)?|redis)://[^\s'\"]+:[^\s'\"]+@[^\s'\"]+",
            _A,
        ),
        severity=Severity.MED,
        title="Database connection string with credentials",
        detail="Detected database URL containing embedded password.",
    ),
    PatternRule(
        id="generic-secret",
        pattern=re.compile(
            r"(?:secret|token|password|passwd|api_key|apikey|api-key|auth_token"
            r"|access_token)\s*[:=]\s*['\"][A-Za-z0-9/+=_-]{16,}['\"]",
            re.IGNORECASE,
        ),
        severity=Severity.MED,
        title="Generic secret assignment",
        detail="Detected secret-like key=value assignment with high-entropy value.",
    ),
)

_I = re.IGNORECASE

RISK_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="rm-rf",
        pattern=re.compile(r"\brm\s+-(rf|fr)\b", _I),
        severity=Severity.MED,
        title="Destructive delete (rm -rf)",
        detail="Command contains rm -rf / rm -fr.",
    ),
    PatternRule(
        id="pipe-to-shell",
        pattern=re.compile(r"(curl|wget)\b[^\n]*\|\s*(bash|sh|zsh)", _I),
        severity=Severity.MED,
        title="Piping network to shell",
        detail="Detected curl|bash or wget|sh pattern.",
    ),
    PatternRule(
        id="chmod-777",
        pattern=re.compile(r"chmod\s+(-r\s+)?777\b", _I),
        severity=Severity.MED,
        title="Over-permissive chmod 777",
        detail="Detected chmod 777.",
    ),
    PatternRule(
        id="ssh-write",
        pattern=re.compile(r"~/\.ssh|/\.ssh/", _I),
        severity=Severity.MED,
        title="Potential SSH config/key write",
        detail="Command references ~/.ssh and key/config files.",
        requires=(
            re.compile(r"(echo|cat|printf|tee)\b", _I),
            re.compile(r"(id_rsa|authorized_keys|known_hosts|config)", _I),
        ),
    ),
    PatternRule(
        id="git-push-main",
        pattern=re.compile(r"\bgit\s+push\b", _I),
        severity=Severity.MED,
        title="Git push to main/master",
        detail="Detected git push to main/master.",
        requires=(re.compile(r"\b(main|master)\b", _I),),
    ),
    PatternRule(
        id="chown-root",
        pattern=re.compile(r"\bchown\b", _I),
        severity=Severity.MED,
        title="chown involving root",
        detail="Detected chown targeting root.",
        requires=(re.compile(r"root", _I),),
    ),
    PatternRule(
        id="sudo",
        pattern=re.compile(r"\bsudo\b", _I),
        severity=Severity.MED,
        title="Uses sudo",
        detail="Command contains sudo.",
    ),
)
