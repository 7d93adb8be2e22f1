"""ShortsBot: YouTube Shorts script generation and scheduling backend."""
