"""Streaming chat client.

Sends prompts to a generative model server over a persistent WebSocket and
assembles the token-by-token replies into a message log.

Architecture Overview:
    - config/: Configuration modules (environment-based)
    - state/: Message log, connection state, session identity
    - messages/: Wire codec for requests and streamed frames
    - stream/: Frame-to-log assembly
    - handlers/: Connection manager and session controller
    - cli.py, render.py: Interactive terminal front-end

Example:
    $ python -m chatstream --server ws://localhost:3000

Environment Variables:
    - CHAT_SERVER_URL: WebSocket endpoint (default ws://localhost:3000)
    - CHAT_MODEL: Model name sent with each prompt (default gemma:2b)
    - CHAT_RECONNECT_DELAY_S: Reconnect delay in seconds (default 10)
    - CHAT_IDENTITY_PATH: File holding the session identity
    - CHAT_LOG_LEVEL: Log level (default INFO)
"""

__version__ = "0.1.0"
