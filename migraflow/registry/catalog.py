# migraflow/registry/catalog.py
# Built-in Sim block definitions. Types the n8n mappings can produce but Sim
# does not ship (manual_trigger, dropbox, wait, ...) are intentionally absent so
# that conversion falls back to a function block for them.

from typing import List

from migraflow.registry.blocks import BlockDefinition, SubBlockDef

_SQL_SUB_BLOCKS = [
    SubBlockDef("operation", "dropdown", default=lambda: "query"),
    SubBlockDef("host", "short-input"),
    SubBlockDef("port", "short-input"),
    SubBlockDef("database", "short-input"),
    SubBlockDef("username", "short-input"),
    SubBlockDef("password", "short-input"),
    SubBlockDef("table", "short-input"),
    SubBlockDef("query", "code"),
]

_SQL_OUTPUTS = {
    "message": "string",
    "rows": {"type": "array", "description": "Rows returned by the query"},
    "rowCount": {"type": "number", "description": "Number of rows affected"},
}

SIM_BLOCKS: List[BlockDefinition] = [
    # ----- Core -----
    BlockDefinition(
        type="function",
        name="Function",
        sub_blocks=[
            SubBlockDef("language", "dropdown"),
            SubBlockDef("code", "code"),
        ],
        outputs={
            "result": {"type": "any", "description": "Return value of the function"},
            "stdout": {"type": "string", "description": "Console output"},
        },
    ),
    BlockDefinition(
        type="condition",
        name="Condition",
        sub_blocks=[SubBlockDef("condition", "condition-input")],
        outputs={
            "content": "string",
            "conditionResult": {"type": "boolean", "description": "Whether the condition matched"},
            "selectedPath": "json",
            "selectedConditionId": "string",
        },
    ),
    BlockDefinition(
        type="router",
        name="Router",
        sub_blocks=[
            SubBlockDef("prompt", "long-input"),
            SubBlockDef("model", "combobox", default=lambda: "gpt-4o"),
        ],
        outputs={
            "content": "string",
            "model": "string",
            "tokens": "json",
            "selectedPath": {"type": "json", "description": "Route chosen by the router"},
        },
    ),
    BlockDefinition(
        type="agent",
        name="Agent",
        sub_blocks=[
            SubBlockDef("systemPrompt", "long-input"),
            SubBlockDef("userPrompt", "long-input"),
            SubBlockDef("model", "combobox", default=lambda: "gpt-4o"),
            SubBlockDef("temperature", "slider", default=0.7),
        ],
        outputs={"content": "string", "model": "string", "tokens": "json"},
    ),
    BlockDefinition(
        type="api",
        name="API",
        sub_blocks=[
            SubBlockDef("url", "short-input"),
            SubBlockDef("method", "dropdown", default=lambda: "GET"),
            SubBlockDef("params", "table"),
            SubBlockDef("headers", "table"),
            SubBlockDef("body", "code"),
        ],
        outputs={
            "data": {"type": "json", "description": "Response body"},
            "status": {"type": "number", "description": "HTTP status code"},
            "headers": {"type": "json", "description": "Response headers"},
        },
    ),

    # ----- Triggers -----
    BlockDefinition(
        type="webhook",
        name="Webhook",
        sub_blocks=[
            SubBlockDef("webhookProvider", "dropdown", default="generic"),
            SubBlockDef("path", "short-input"),
            SubBlockDef("httpMethod", "dropdown", default="POST"),
        ],
        outputs={
            "payload": {"type": "json", "description": "Request body"},
            "headers": "json",
            "method": "string",
        },
    ),
    BlockDefinition(
        type="schedule",
        name="Schedule",
        sub_blocks=[
            SubBlockDef("scheduleType", "dropdown", default=lambda: "daily"),
            SubBlockDef("cronExpression", "short-input"),
            SubBlockDef("timezone", "dropdown", default="UTC"),
        ],
    ),

    # ----- Communication -----
    BlockDefinition(
        type="gmail",
        name="Gmail",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "send_gmail"),
            SubBlockDef("credential", "oauth-input"),
            SubBlockDef("to", "short-input"),
            SubBlockDef("subject", "short-input"),
            SubBlockDef("message", "long-input"),
        ],
        outputs={"content": "string", "metadata": "json"},
    ),
    BlockDefinition(
        type="outlook",
        name="Outlook",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "send_outlook"),
            SubBlockDef("credential", "oauth-input"),
            SubBlockDef("to", "short-input"),
            SubBlockDef("subject", "short-input"),
            SubBlockDef("message", "long-input"),
        ],
        outputs={"message": "string", "results": "json"},
    ),
    BlockDefinition(
        type="slack",
        name="Slack",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "send"),
            SubBlockDef("authMethod", "dropdown", default="oauth"),
            SubBlockDef("credential", "oauth-input"),
            SubBlockDef("channel", "short-input"),
            SubBlockDef("message", "long-input"),
        ],
        outputs={
            "ts": {"type": "string", "description": "Message timestamp"},
            "channel": {"type": "string", "description": "Channel id"},
        },
    ),
    BlockDefinition(
        type="telegram",
        name="Telegram",
        sub_blocks=[
            SubBlockDef("botToken", "short-input"),
            SubBlockDef("chatId", "short-input"),
            SubBlockDef("message", "long-input"),
        ],
        outputs={"ok": "boolean", "result": "json"},
    ),
    BlockDefinition(
        type="discord",
        name="Discord",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "discord_send_message"),
            SubBlockDef("botToken", "short-input"),
            SubBlockDef("channelId", "short-input"),
            SubBlockDef("message", "long-input"),
        ],
        outputs={"message": "string", "data": "json"},
    ),
    BlockDefinition(
        type="microsoft_teams",
        name="Microsoft Teams",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "write_chat"),
            SubBlockDef("credential", "oauth-input"),
            SubBlockDef("chatId", "short-input"),
            SubBlockDef("message", "long-input"),
        ],
        outputs={"content": "string", "metadata": "json"},
    ),

    # ----- Storage & files -----
    BlockDefinition(
        type="google_sheets",
        name="Google Sheets",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "read"),
            SubBlockDef("credential", "oauth-input"),
            SubBlockDef("spreadsheetId", "short-input"),
            SubBlockDef("range", "short-input"),
            SubBlockDef("values", "long-input"),
        ],
        outputs={"data": "json", "metadata": "json"},
    ),
    BlockDefinition(
        type="google_drive",
        name="Google Drive",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "list"),
            SubBlockDef("credential", "oauth-input"),
            SubBlockDef("folderId", "short-input"),
            SubBlockDef("fileName", "short-input"),
        ],
        outputs={"file": "json", "files": "json"},
    ),
    BlockDefinition(
        type="airtable",
        name="Airtable",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "read"),
            SubBlockDef("credential", "oauth-input"),
            SubBlockDef("baseId", "short-input"),
            SubBlockDef("tableId", "short-input"),
            SubBlockDef("fields", "code"),
        ],
        outputs={"records": "json", "metadata": "json"},
    ),

    # ----- Databases -----
    BlockDefinition(type="mysql", name="MySQL", sub_blocks=list(_SQL_SUB_BLOCKS), outputs=dict(_SQL_OUTPUTS)),
    BlockDefinition(type="postgresql", name="PostgreSQL", sub_blocks=list(_SQL_SUB_BLOCKS), outputs=dict(_SQL_OUTPUTS)),
    BlockDefinition(
        type="mongodb",
        name="MongoDB",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "query"),
            SubBlockDef("connectionString", "short-input"),
            SubBlockDef("collection", "short-input"),
            SubBlockDef("query", "code"),
        ],
        outputs={"message": "string", "documents": "array", "documentCount": "number"},
    ),

    # ----- Payment -----
    BlockDefinition(
        type="stripe",
        name="Stripe",
        sub_blocks=[
            SubBlockDef("operation", "dropdown", default=lambda: "list_payment_intents"),
            SubBlockDef("apiKey", "short-input"),
            SubBlockDef("amount", "short-input"),
            SubBlockDef("currency", "short-input", default="usd"),
        ],
        outputs={"object": "json", "data": "json"},
    ),
]
