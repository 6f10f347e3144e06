"""Production configuration guard — enforces hard constraints at startup.

The guard runs once before the relay starts taking traffic and fails hard
(raises ``ProductionConfigError``) if the configuration cannot work in
production.
"""

from __future__ import annotations

import logging

from chatlink.config import ChatlinkConfig

logger = logging.getLogger(__name__)


class ProductionConfigError(RuntimeError):
    """Raised when production configuration constraints are violated.

    The process should exit; the relay cannot reach the host platform
    safely with the current configuration.
    """


def enforce_production_constraints(config: ChatlinkConfig) -> None:
    """Validate all production-critical configuration constraints.

    Constraints enforced
    --------------------
    1. Debug mode must be disabled.
    2. A bot token must be configured.
    3. The delivery timeout must be positive.

    Raises
    ------
    ProductionConfigError
        If any production constraint is violated.
    """
    if not config.is_production:
        return

    violations: list[str] = []

    if config.debug:
        violations.append(
            "debug=True is not allowed in production. "
            "Set CHATLINK_DEBUG=false."
        )

    if not config.bot_token:
        violations.append(
            "bot_token is required in production but not configured. "
            "Set CHATLINK_BOT_TOKEN."
        )

    if config.delivery_timeout_seconds <= 0:
        violations.append(
            f"delivery_timeout_seconds must be positive, got "
            f"{config.delivery_timeout_seconds}."
        )

    if violations:
        msg = (
            "Production configuration guard failed.\n"
            + "\n".join(f"  - {v}" for v in violations)
        )
        logger.critical(msg)
        raise ProductionConfigError(msg)

    logger.info("Production configuration guard passed.")
