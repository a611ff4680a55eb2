DEFAULT_COMMAND_CHAR: str = "!"

# Substitution slot inside an alias format template.
ALIAS_SLOT: str = "%s"

DEFAULT_QUERY_ATTEMPTS: int = 3
DEFAULT_QUERY_RETRY_DELAY: float = 0.25  # seconds
DEFAULT_QUERY_TIMEOUT: float = 3.0  # seconds

DEFAULT_CONFIG_FILE: str = "config.json"
DEFAULT_ALIASES_FILE: str = "aliases.json"
DEFAULT_LOG_FILE: str = "log"

TWITCH_IRC_HOST: str = "irc.chat.twitch.tv"
TWITCH_IRC_PORT: int = 6667

# Delay before reconnecting after the chat connection drops; doubled after
# each failed attempt up to the maximum.
DEFAULT_RECONNECT_DELAY: float = 1.0  # seconds
MAX_RECONNECT_DELAY: float = 60.0  # seconds

# Well-known A2S rule names.
RULE_OWNER_NAME: str = "OwningPlayerName"
RULE_MAX_CONNECTIONS: str = "NumPublicConnections"
RULE_OPEN_CONNECTIONS: str = "NumOpenPublicConnections"
RULE_MAP: str = "p2"
