"""Canonical identity resolution for component identifiers.

Free-form names such as ``"Supabase"`` or ``"@supabase/mcp"`` resolve to a
single canonical ID (``"supabase-mcp"``) through an alias table. The table
is injected into a Canonicalizer instance, so callers and tests can supply
their own without touching shared state.
"""

from typing import Mapping, Optional


PairKey = tuple[str, str]

# Keys are normalized (lowercase, trimmed), values are canonical IDs
DEFAULT_ALIASES: dict[str, str] = {
    # Database
    "supabase": "supabase-mcp",
    "@supabase/mcp": "supabase-mcp",
    "@supabase/mcp-server": "supabase-mcp",
    "neon": "neon-mcp",
    "@neondatabase/mcp": "neon-mcp",
    "@neondatabase/mcp-server": "neon-mcp",
    "planetscale": "planetscale-mcp",
    "@planetscale/mcp": "planetscale-mcp",
    "turso": "turso-mcp",
    "@tursodb/mcp": "turso-mcp",
    "mongodb": "mongodb-mcp",
    "@mongodb/mcp": "mongodb-mcp",

    # ORM
    "prisma": "prisma-mcp",
    "@prisma/mcp": "prisma-mcp",
    "drizzle": "drizzle-mcp",
    "drizzle-orm": "drizzle-mcp",
    "typeorm": "typeorm-mcp",

    # Auth
    "clerk": "clerk-mcp",
    "@clerk/mcp": "clerk-mcp",
    "auth0": "auth0-mcp",
    "@auth0/mcp": "auth0-mcp",
    "supabase-auth": "supabase-auth-mcp",
    "lucia": "lucia-mcp",

    # Payments
    "stripe": "stripe-mcp",
    "@stripe/mcp": "stripe-mcp",
    "paddle": "paddle-mcp",
    "@paddle/mcp": "paddle-mcp",
    "lemonsqueezy": "lemonsqueezy-mcp",
    "lemon-squeezy": "lemonsqueezy-mcp",

    # Deployment
    "vercel": "vercel-mcp",
    "@vercel/mcp": "vercel-mcp",
    "netlify": "netlify-mcp",
    "@netlify/mcp": "netlify-mcp",
    "cloudflare": "cloudflare-mcp",
    "@cloudflare/mcp": "cloudflare-mcp",
    "railway": "railway-mcp",
    "fly": "fly-mcp",
    "fly.io": "fly-mcp",
    "render": "render-mcp",

    # Storage
    "r2": "r2-mcp",
    "cloudflare-r2": "r2-mcp",
    "s3": "s3-mcp",
    "aws-s3": "s3-mcp",
    "uploadthing": "uploadthing-mcp",

    # Email
    "resend": "resend-mcp",
    "@resend/mcp": "resend-mcp",
    "sendgrid": "sendgrid-mcp",
    "postmark": "postmark-mcp",

    # Version control
    "github": "github-mcp",
    "@github/mcp": "github-mcp",
    "gitlab": "gitlab-mcp",
    "@gitlab/mcp": "gitlab-mcp",

    # AI
    "openai": "openai-mcp",
    "@openai/mcp": "openai-mcp",
    "anthropic": "anthropic-mcp",
    "@anthropic/mcp": "anthropic-mcp",
    "perplexity": "perplexity-mcp",
    "context7": "context7-mcp",

    # Communication
    "slack": "slack-mcp",
    "@slack/mcp": "slack-mcp",
    "discord": "discord-mcp",
    "telegram": "telegram-mcp",

    # Monitoring
    "sentry": "sentry-mcp",
    "@sentry/mcp": "sentry-mcp",
    "datadog": "datadog-mcp",

    # Testing
    "playwright": "playwright-mcp",
    "@playwright/mcp": "playwright-mcp",
    "puppeteer": "puppeteer-mcp",

    # Documentation
    "obsidian": "obsidian-mcp",
    "notion": "notion-mcp",
    "confluence": "confluence-mcp",

    # General
    "filesystem": "filesystem-mcp",
    "sequential-thinking": "sequential-thinking-mcp",
    "brave-search": "brave-search-mcp",
}


def normalize(identifier: str) -> str:
    return identifier.strip().lower()


def pair_key(canonical_a: str, canonical_b: str) -> PairKey:
    """Order-independent key for two already-canonical IDs."""
    if canonical_b < canonical_a:
        return canonical_b, canonical_a
    return canonical_a, canonical_b


class Canonicalizer:
    """Resolves free-form identifiers to canonical IDs.

    Every alias target must itself be canonical (normalized and not an alias
    of something else), which keeps ``canonicalize`` idempotent.
    """

    def __init__(self, aliases: Optional[Mapping[str, str]] = None):
        if aliases is None:
            aliases = DEFAULT_ALIASES
        self._aliases = {normalize(key): target for key, target in aliases.items()}

        for key, target in self._aliases.items():
            if normalize(target) != target:
                raise ValueError(f"Alias '{key}' targets non-normalized ID '{target}'")
            chained = self._aliases.get(target, target)
            if chained != target:
                raise ValueError(
                    f"Alias '{key}' targets '{target}', which is itself an alias of '{chained}'"
                )

    def canonicalize(self, identifier: str) -> str:
        """Lowercase and trim, then resolve through the alias table."""
        normalized = normalize(identifier)
        return self._aliases.get(normalized, normalized)

    def canonicalize_all(self, identifiers) -> list[str]:
        return [self.canonicalize(identifier) for identifier in identifiers]

    def unique(self, identifiers) -> list[str]:
        """Canonical IDs with duplicates removed, first-seen order kept."""
        return list(dict.fromkeys(self.canonicalize_all(identifiers)))

    def pair_key(self, a: str, b: str) -> PairKey:
        return pair_key(self.canonicalize(a), self.canonicalize(b))
