#!/usr/bin/env python3
"""
MCP Server for Coze Workflows

This MCP server keeps a small set of text notes in memory and lets AI
assistants run Coze workflows through the Coze HTTP API.

Usage:
    coze-workflow-server serve
    python3 -m coze_workflow_server.server

Environment variables:
    COZE_API_TOKEN: Coze personal access token (required)
"""

import asyncio
import sys
from typing import Any, Optional
from urllib.parse import urlparse

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    CallToolRequest,
    CallToolResult,
    EmbeddedResource,
    ErrorData,
    GetPromptResult,
    Prompt,
    PromptMessage,
    Resource,
    ServerResult,
    TextContent,
    TextResourceContents,
    Tool,
)

from . import __version__
from .config import ConfigurationError, Settings, load_settings
from .coze import CozeWorkflowClient, WorkflowInvocation
from .notes import InvalidNoteError, NoteNotFoundError, NoteStore


SERVER_NAME = "coze-workflow-server"
NOTE_SCHEME = "note"
NOTE_MIME_TYPE = "text/plain"
SUMMARIZE_PROMPT = "summarize_notes"


def note_uri(note_id: str) -> str:
    return f"{NOTE_SCHEME}:///{note_id}"


def _error(code: int, message: str) -> McpError:
    return McpError(ErrorData(code=code, message=message))


def _string_arg(arguments: dict, key: str) -> Optional[str]:
    """Return a non-empty string argument, or None if missing, empty or not a string."""
    value = arguments.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _optional_string_arg(arguments: dict, key: str) -> Optional[str]:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _error(INVALID_PARAMS, f"{key} must be a string")
    return value or None


CREATE_NOTE_TOOL = Tool(
    name="create_note",
    description="Create a new note",
    inputSchema={
        "type": "object",
        "properties": {
            "title": {
                "type": "string",
                "description": "Title of the note"
            },
            "content": {
                "type": "string",
                "description": "Text content of the note"
            }
        },
        "required": ["title", "content"]
    }
)

RUN_WORKFLOW_TOOL = Tool(
    name="run_coze_workflow",
    description="Run a Coze workflow",
    inputSchema={
        "type": "object",
        "properties": {
            "workflow_id": {
                "type": "string",
                "description": "ID of the workflow to run"
            },
            "parameters": {
                "type": "object",
                "description": "Input parameters for the workflow"
            },
            "bot_id": {
                "type": "string",
                "description": "Associated Bot ID (optional)"
            },
            "app_id": {
                "type": "string",
                "description": "App ID (optional)"
            }
        },
        "required": ["workflow_id", "parameters"]
    }
)


class CozeWorkflowServer:
    """Handler bodies for the MCP requests this server answers."""

    def __init__(self, notes: NoteStore, workflow_client: CozeWorkflowClient):
        self.notes = notes
        self.workflow_client = workflow_client

    # Resources

    def list_resources(self) -> list[Resource]:
        return [
            Resource(
                uri=note_uri(note_id),
                mimeType=NOTE_MIME_TYPE,
                name=note.title,
                description=f"A text note: {note.title}"
            )
            for note_id, note in self.notes.list()
        ]

    def read_resource(self, uri: str) -> str:
        """Return the content of the note addressed by a ``note:///<id>`` URI."""
        parsed = urlparse(str(uri))
        if parsed.scheme != NOTE_SCHEME:
            raise _error(INVALID_REQUEST, f"Unknown resource: {uri}")

        note_id = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
        try:
            return self.notes.read(note_id)
        except NoteNotFoundError as e:
            raise _error(INVALID_REQUEST, str(e)) from None

    # Tools

    def list_tools(self) -> list[Tool]:
        return [CREATE_NOTE_TOOL, RUN_WORKFLOW_TOOL]

    async def call_tool(self, name: str, arguments: Optional[dict]) -> list[TextContent]:
        arguments = arguments or {}

        if name == CREATE_NOTE_TOOL.name:
            return self.create_note(arguments)

        elif name == RUN_WORKFLOW_TOOL.name:
            return await self.run_workflow(arguments)

        raise _error(METHOD_NOT_FOUND, "Unknown tool")

    def create_note(self, arguments: dict) -> list[TextContent]:
        title = _string_arg(arguments, "title")
        content = _string_arg(arguments, "content")
        if title is None or content is None:
            raise _error(INVALID_PARAMS, "Title and content are required")

        try:
            note_id = self.notes.create(title, content)
        except InvalidNoteError as e:
            raise _error(INVALID_PARAMS, str(e)) from None

        return [TextContent(type="text", text=f"Created note {note_id}: {title}")]

    async def run_workflow(self, arguments: dict) -> list[TextContent]:
        workflow_id = _string_arg(arguments, "workflow_id")
        if workflow_id is None:
            raise _error(INVALID_PARAMS, "Workflow ID is required")

        parameters: Any = arguments.get("parameters")
        if parameters is None:
            parameters = {}
        elif not isinstance(parameters, dict):
            raise _error(INVALID_PARAMS, "Workflow parameters must be an object")

        invocation = WorkflowInvocation(
            workflow_id=workflow_id,
            parameters=parameters,
            bot_id=_optional_string_arg(arguments, "bot_id"),
            app_id=_optional_string_arg(arguments, "app_id"),
        )

        outcome = await self.workflow_client.run(invocation)
        if not outcome.ok:
            raise _error(INTERNAL_ERROR, outcome.error_message())

        return [TextContent(type="text", text=outcome.render())]

    # Prompts

    def list_prompts(self) -> list[Prompt]:
        return [
            Prompt(
                name=SUMMARIZE_PROMPT,
                description="Summarize all notes",
            )
        ]

    def get_prompt(self, name: str, arguments: Optional[dict] = None) -> GetPromptResult:
        if name != SUMMARIZE_PROMPT:
            raise _error(METHOD_NOT_FOUND, "Unknown prompt")

        embedded_notes = [
            PromptMessage(
                role="user",
                content=EmbeddedResource(
                    type="resource",
                    resource=TextResourceContents(
                        uri=note_uri(note_id),
                        mimeType=NOTE_MIME_TYPE,
                        text=note.content
                    )
                )
            )
            for note_id, note in self.notes.list()
        ]

        return GetPromptResult(
            messages=[
                PromptMessage(
                    role="user",
                    content=TextContent(type="text", text="Please summarize the following notes:")
                ),
                *embedded_notes,
                PromptMessage(
                    role="user",
                    content=TextContent(
                        type="text",
                        text="Provide a concise summary of all the notes above."
                    )
                ),
            ]
        )


def create_server(app: CozeWorkflowServer) -> Server:
    """Create the MCP server with resources, tools and prompts."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_resources()
    async def list_resources() -> list[Resource]:
        return app.list_resources()

    @server.read_resource()
    async def read_resource(uri) -> list[ReadResourceContents]:
        content = app.read_resource(str(uri))
        return [ReadResourceContents(content=content, mime_type=NOTE_MIME_TYPE)]

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return app.list_tools()

    # Registered directly: the call_tool decorator turns McpError into an
    # isError result, which drops the error code.
    async def call_tool(request: CallToolRequest) -> ServerResult:
        content = await app.call_tool(request.params.name, request.params.arguments)
        return ServerResult(CallToolResult(content=content))

    server.request_handlers[CallToolRequest] = call_tool

    @server.list_prompts()
    async def list_prompts() -> list[Prompt]:
        return app.list_prompts()

    @server.get_prompt()
    async def get_prompt(name: str, arguments: Optional[dict[str, str]]) -> GetPromptResult:
        return app.get_prompt(name, arguments)

    return server


async def main(settings: Optional[Settings] = None):
    # Configuration errors must surface before stdio is taken over.
    if settings is None:
        settings = load_settings()

    app = CozeWorkflowServer(
        notes=NoteStore(),
        workflow_client=CozeWorkflowClient(settings.api_token),
    )
    server = create_server(app)

    async with stdio_server() as (read_stream, write_stream):
        print("Coze Workflow MCP server running on stdio", file=sys.stderr)
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
