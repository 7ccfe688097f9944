"""
Poller emoji definitions.

Emojis for repositories, branches, test runs and notifications.
"""

from shared.reporter.emojis.base_emojis import ComponentEmoji


class SystemEmoji(ComponentEmoji):
    """Process lifecycle emojis."""

    STARTUP = "🚀"
    SHUTDOWN = "🛑"
    CONFIG = "⚙️"
    WARNING = "⚠️"
    ERROR = "💥"


class VeilleurEmoji(ComponentEmoji):
    """
    Poll loop emojis.

    Categories:
        - Repositories: Discovery and iteration
        - Git: Branch and commit operations
        - Tests: Execution and outcome
        - Notifications: Failure reports
    """

    # ============================================================
    # Repositories
    # ============================================================
    SCAN = "🔭"  # Directory scan
    REPO = "📦"  # Repository

    # ============================================================
    # Git Operations
    # ============================================================
    GIT = "🔀"  # Git operation
    BRANCH = "🌿"  # Branch checkout
    PULL = "⬇️"  # Pull
    UNCHANGED = "💤"  # Branch unchanged, skipped
    MARKER = "📌"  # Marker recorded

    # ============================================================
    # Tests
    # ============================================================
    TEST_RUN = "🔬"  # Test command running
    TEST_PASS = "✅"  # Tests passed
    TEST_FAIL = "❌"  # Tests failed
    DRY_RUN = "🧪"  # Dry-run mode
    TIMEOUT = "⏱️"  # Command timed out

    # ============================================================
    # Notifications
    # ============================================================
    MAIL = "📧"  # Email sent
    MAIL_OFF = "🔕"  # No recipients
