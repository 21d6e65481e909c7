"""Store key builders for consistent key formatting."""

from foxsource.core.types import GroupConfigKey


class StoreKeys:
    """Store key builders for consistent key formatting."""

    PREFIX = "foxsource"

    @classmethod
    def twitter_account(cls, user_id: int) -> str:
        """Key for a user's linked Twitter access token."""
        return f"{cls.PREFIX}:twitter:account:{user_id}"

    @classmethod
    def twitter_request(cls, user_id: int) -> str:
        """Key for a user's pending Twitter request token."""
        return f"{cls.PREFIX}:twitter:request:{user_id}"

    @classmethod
    def group_config(cls, chat_id: int, key: GroupConfigKey | str) -> str:
        """Key for a per-chat configuration flag."""
        return f"{cls.PREFIX}:group:{chat_id}:{key}"
