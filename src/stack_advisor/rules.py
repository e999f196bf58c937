"""Compatibility rule table and the pair index built from it."""

import logging
from types import MappingProxyType
from typing import Iterable, Optional, Union

from .canonical import Canonicalizer, PairKey
from .schema import CompatibilityRule, McpCategory, RuleStatus

logger = logging.getLogger(__name__)


# Each rule stores mcp_a < mcp_b (canonical IDs)
COMPATIBILITY_RULES: list[CompatibilityRule] = [
    # =========================================================================
    # Database conflicts
    # =========================================================================
    CompatibilityRule(
        id="db-001", mcp_a="neon-mcp", mcp_b="supabase-mcp",
        status="conflict", category="database", severity="critical",
        reason="Both provide managed PostgreSQL. Using multiple database providers increases complexity and cost.",
        solution="Choose one database provider. Neon for serverless scale, Supabase for full BaaS features.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="db-002", mcp_a="planetscale-mcp", mcp_b="supabase-mcp",
        status="conflict", category="database", severity="critical",
        reason="PlanetScale (MySQL) and Supabase (PostgreSQL) are different database paradigms.",
        solution="Choose one database. Consider query patterns and team expertise.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="db-003", mcp_a="neon-mcp", mcp_b="planetscale-mcp",
        status="conflict", category="database", severity="critical",
        reason="Neon (PostgreSQL) and PlanetScale (MySQL) are fundamentally different databases.",
        solution="Pick one based on your ORM preference and team experience.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="db-004", mcp_a="neon-mcp", mcp_b="turso-mcp",
        status="conflict", category="database", severity="warning",
        reason="Both are serverless databases. Turso (SQLite) vs Neon (PostgreSQL) serve different use cases.",
        solution="Use Turso for edge-first apps, Neon for traditional server workloads.",
        recommendation="either",
    ),

    # =========================================================================
    # ORM redundancies
    # =========================================================================
    CompatibilityRule(
        id="orm-001", mcp_a="drizzle-mcp", mcp_b="prisma-mcp",
        status="redundant", category="orm", severity="warning",
        reason="Both are TypeScript ORMs. Having two ORMs creates inconsistent data access patterns.",
        solution="Standardize on one ORM. Drizzle for SQL-first, Prisma for schema-first.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="orm-002", mcp_a="prisma-mcp", mcp_b="typeorm-mcp",
        status="redundant", category="orm", severity="warning",
        reason="Both are TypeScript ORMs with overlapping functionality.",
        solution="Choose Prisma for better DX, TypeORM for decorator-based entities.",
        recommendation="A",
    ),
    CompatibilityRule(
        id="orm-003", mcp_a="drizzle-mcp", mcp_b="typeorm-mcp",
        status="redundant", category="orm", severity="warning",
        reason="Multiple ORMs add complexity without clear benefit.",
        solution="Standardize on Drizzle for modern SQL-like syntax.",
        recommendation="A",
    ),

    # =========================================================================
    # Auth conflicts
    # =========================================================================
    CompatibilityRule(
        id="auth-001", mcp_a="auth0-mcp", mcp_b="clerk-mcp",
        status="conflict", category="auth", severity="warning",
        reason="Both are full auth providers. Using multiple auth systems is confusing for users.",
        solution="Choose Clerk for faster setup, Auth0 for enterprise compliance.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="auth-002", mcp_a="clerk-mcp", mcp_b="supabase-auth-mcp",
        status="redundant", category="auth", severity="info",
        reason="Both provide auth. Supabase Auth is included with Supabase, Clerk is standalone.",
        solution="Use Supabase Auth if using Supabase DB, Clerk if you need more auth features.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="auth-003", mcp_a="auth0-mcp", mcp_b="lucia-mcp",
        status="conflict", category="auth", severity="warning",
        reason="Auth0 is hosted auth, Lucia is self-hosted. Different paradigms.",
        solution="Use Auth0 for managed auth, Lucia for full control.",
        recommendation="either",
    ),

    # =========================================================================
    # Database + ORM synergies
    # =========================================================================
    CompatibilityRule(
        id="syn-001", mcp_a="drizzle-mcp", mcp_b="neon-mcp",
        status="synergy", category="database", severity="info",
        reason="Drizzle + Neon is a powerful serverless stack with excellent TypeScript support.",
        recommendation="both",
    ),
    CompatibilityRule(
        id="syn-002", mcp_a="drizzle-mcp", mcp_b="turso-mcp",
        status="synergy", category="database", severity="info",
        reason="Drizzle has first-class Turso support for edge-first SQLite applications.",
        recommendation="both",
    ),
    CompatibilityRule(
        id="syn-003", mcp_a="prisma-mcp", mcp_b="supabase-mcp",
        status="conditional", category="database", severity="info",
        reason="Prisma works with Supabase but requires proper connection pooling setup.",
        solution="Use Supabase connection pooler URL in Prisma schema.",
        recommendation="both",
    ),
    CompatibilityRule(
        id="syn-004", mcp_a="planetscale-mcp", mcp_b="prisma-mcp",
        status="synergy", category="database", severity="info",
        reason="Prisma + PlanetScale is a well-documented, production-ready combination.",
        recommendation="both",
    ),

    # =========================================================================
    # Platform synergies
    # =========================================================================
    CompatibilityRule(
        id="syn-005", mcp_a="github-mcp", mcp_b="vercel-mcp",
        status="synergy", category="deployment", severity="info",
        reason="Vercel has native GitHub integration for automatic deployments.",
        recommendation="both",
        suggest_when_missing=("vercel-mcp",),
    ),
    CompatibilityRule(
        id="syn-006", mcp_a="cloudflare-mcp", mcp_b="r2-mcp",
        status="synergy", category="storage", severity="info",
        reason="R2 is Cloudflare's S3-compatible storage, tightly integrated with Workers.",
        recommendation="both",
        suggest_when_missing=("r2-mcp",),
    ),
    CompatibilityRule(
        id="syn-007", mcp_a="resend-mcp", mcp_b="stripe-mcp",
        status="synergy", category="payments", severity="info",
        reason="Stripe for payments + Resend for transactional emails (receipts, invoices).",
        recommendation="both",
        suggest_when_missing=("resend-mcp",),
    ),
    CompatibilityRule(
        id="syn-008", mcp_a="supabase-auth-mcp", mcp_b="supabase-mcp",
        status="synergy", category="auth", severity="info",
        reason="Supabase Auth is built into Supabase and shares the same user context.",
        recommendation="both",
    ),
    CompatibilityRule(
        id="syn-009", mcp_a="github-mcp", mcp_b="netlify-mcp",
        status="synergy", category="deployment", severity="info",
        reason="Netlify has native GitHub integration for CI/CD.",
        recommendation="both",
    ),

    # =========================================================================
    # Deployment redundancies
    # =========================================================================
    CompatibilityRule(
        id="deploy-001", mcp_a="netlify-mcp", mcp_b="vercel-mcp",
        status="redundant", category="deployment", severity="warning",
        reason="Both are frontend deployment platforms with similar features.",
        solution="Choose Vercel for Next.js, Netlify for static sites and forms.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="deploy-002", mcp_a="fly-mcp", mcp_b="railway-mcp",
        status="redundant", category="deployment", severity="info",
        reason="Both are container deployment platforms targeting similar use cases.",
        solution="Choose Railway for simpler DX, Fly for more control.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="deploy-003", mcp_a="cloudflare-mcp", mcp_b="vercel-mcp",
        status="redundant", category="deployment", severity="info",
        reason="Both offer edge computing. Consider your framework support needs.",
        solution="Vercel for Next.js, Cloudflare for Workers/Pages.",
        recommendation="either",
    ),

    # =========================================================================
    # Payments
    # =========================================================================
    CompatibilityRule(
        id="pay-001", mcp_a="paddle-mcp", mcp_b="stripe-mcp",
        status="conflict", category="payments", severity="warning",
        reason="Both are payment processors. Using multiple adds complexity.",
        solution="Paddle for MoR (handles taxes), Stripe for more control.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="pay-002", mcp_a="lemonsqueezy-mcp", mcp_b="paddle-mcp",
        status="redundant", category="payments", severity="info",
        reason="Both are Merchant of Record solutions with similar features.",
        solution="LemonSqueezy for creators, Paddle for SaaS.",
        recommendation="either",
    ),

    # =========================================================================
    # AI
    # =========================================================================
    CompatibilityRule(
        id="ai-001", mcp_a="anthropic-mcp", mcp_b="openai-mcp",
        status="compatible", category="ai", severity="info",
        reason="Can use multiple AI providers for fallback or model comparison.",
        recommendation="both",
    ),
    CompatibilityRule(
        id="ai-002", mcp_a="context7-mcp", mcp_b="perplexity-mcp",
        status="synergy", category="ai", severity="info",
        reason="Context7 for docs, Perplexity for web search - complementary capabilities.",
        recommendation="both",
    ),
    CompatibilityRule(
        id="ai-003", mcp_a="brave-search-mcp", mcp_b="perplexity-mcp",
        status="redundant", category="ai", severity="info",
        reason="Both provide web search capabilities. Perplexity includes AI synthesis.",
        solution="Choose Perplexity for AI answers, Brave for raw search results.",
        recommendation="either",
    ),

    # =========================================================================
    # Version control, monitoring, email
    # =========================================================================
    CompatibilityRule(
        id="vcs-001", mcp_a="github-mcp", mcp_b="gitlab-mcp",
        status="conflict", category="version-control", severity="warning",
        reason="Using multiple Git platforms for the same project creates confusion.",
        solution="Standardize on one platform for your organization.",
        recommendation="either",
    ),
    CompatibilityRule(
        id="mon-001", mcp_a="datadog-mcp", mcp_b="sentry-mcp",
        status="synergy", category="monitoring", severity="info",
        reason="Sentry for errors, Datadog for APM/metrics - different focus areas.",
        recommendation="both",
    ),
    CompatibilityRule(
        id="email-001", mcp_a="resend-mcp", mcp_b="sendgrid-mcp",
        status="redundant", category="email", severity="info",
        reason="Both are transactional email services with similar capabilities.",
        solution="Choose Resend for modern DX, SendGrid for enterprise scale.",
        recommendation="A",
    ),
]

# Popular components offered in matrix views, grouped by area
CURATED_MCPS: tuple[str, ...] = (
    # Database
    "supabase-mcp", "neon-mcp", "planetscale-mcp", "turso-mcp",
    # ORM
    "prisma-mcp", "drizzle-mcp",
    # Auth
    "clerk-mcp", "auth0-mcp",
    # Payments
    "stripe-mcp", "paddle-mcp",
    # Deployment
    "vercel-mcp", "netlify-mcp", "cloudflare-mcp",
    # AI
    "openai-mcp", "anthropic-mcp", "context7-mcp",
    # Version control
    "github-mcp",
    # Email
    "resend-mcp",
    # Monitoring
    "sentry-mcp",
)


def rules_by_category(
    category: Union[McpCategory, str],
    rules: Optional[Iterable[CompatibilityRule]] = None,
) -> list[CompatibilityRule]:
    category = McpCategory(category)
    source = COMPATIBILITY_RULES if rules is None else rules
    return [rule for rule in source if rule.category == category]


def rules_by_status(
    status: Union[RuleStatus, str],
    rules: Optional[Iterable[CompatibilityRule]] = None,
) -> list[CompatibilityRule]:
    status = RuleStatus(status)
    source = COMPATIBILITY_RULES if rules is None else rules
    return [rule for rule in source if rule.status == status]


class RuleIndex:
    """Immutable unordered-pair lookup over a rule list.

    Built once at the composition root and shared by reference. A later rule
    for the same pair replaces an earlier one; build a new index to change
    the rules.
    """

    def __init__(self, rules: Iterable[CompatibilityRule], canonicalizer: Canonicalizer):
        self.canonicalizer = canonicalizer
        self.rules: tuple[CompatibilityRule, ...] = tuple(rules)

        index: dict[PairKey, CompatibilityRule] = {}
        for rule in self.rules:
            key = canonicalizer.pair_key(rule.mcp_a, rule.mcp_b)
            previous = index.get(key)
            if previous is not None:
                logger.warning(
                    "Rule %s replaces %s for pair %s / %s", rule.id, previous.id, key[0], key[1]
                )
            index[key] = rule

        self._index = MappingProxyType(index)
        logger.debug("Indexed %s rules over %s pairs", len(self.rules), len(self._index))

    def find_rule(self, a: str, b: str) -> Optional[CompatibilityRule]:
        """Rule for two identifiers in either order, or None."""
        return self._index.get(self.canonicalizer.pair_key(a, b))

    def pairs(self) -> list[PairKey]:
        return list(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        return key in self._index


class RuleValidator:
    """Checks a rule table for integrity problems and reports issues."""

    def __init__(self, canonicalizer: Canonicalizer):
        self.canonicalizer = canonicalizer

    def validate(self, rules: Iterable[CompatibilityRule]) -> list[str]:
        """Validate the rules and return a list of issues."""
        issues = []
        rules = list(rules)

        # Check for duplicate rule IDs
        ids = [rule.id for rule in rules]
        duplicates = sorted({rule_id for rule_id in ids if ids.count(rule_id) > 1})
        if duplicates:
            issues.append(f"Duplicate rule IDs: {', '.join(duplicates)}")

        seen_pairs: dict[PairKey, str] = {}
        for rule in rules:
            prefix = f"[{rule.id}]"

            for side in (rule.mcp_a, rule.mcp_b):
                if self.canonicalizer.canonicalize(side) != side:
                    issues.append(f"{prefix} '{side}' is not a canonical ID")

            key = self.canonicalizer.pair_key(rule.mcp_a, rule.mcp_b)
            if key in seen_pairs:
                issues.append(f"{prefix} Duplicates pair already covered by {seen_pairs[key]}")
            else:
                seen_pairs[key] = rule.id

            for target in rule.suggest_when_missing:
                if self.canonicalizer.canonicalize(target) != target:
                    issues.append(f"{prefix} Suggestion '{target}' is not a canonical ID")

        return issues
