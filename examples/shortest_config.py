import os

config = {
    "headless": False,
    "baseUrl": "http://localhost:3000",
    "testPattern": "app/**/*.test.ts",
    "ai": {
        "provider": "anthropic",
    },
    "mailbox": {
        "apiKey": os.getenv("MAILOSAUR_API_KEY"),
        "serverId": os.getenv("MAILOSAUR_SERVER_ID"),
    },
}
