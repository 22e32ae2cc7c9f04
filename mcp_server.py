#!/usr/bin/env python3
"""
GitLab Deployments MCP Server

A Model Context Protocol server exposing GitLab project deployments as a tool,
so assistants can answer "what was deployed where, and when".

Runs over stdio.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List

from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from gitlab_deployments import __version__
from gitlab_deployments.config import settings
from gitlab_deployments.core.errors import GitLabError
from gitlab_deployments.domain.services.deployments_service import DeploymentsService, ListDeploymentsOptions
from gitlab_deployments.infrastructure.gitlab.base_client import GitLabClient

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

OPTION_KEYS = ("page", "per_page", "order_by", "sort", "search")

server = Server("gitlab-deployments")


@server.list_tools()
async def handle_list_tools() -> List[Tool]:
    return [
        Tool(
            name="list_deployments",
            description="List the deployments of a GitLab project",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": {
                        "type": ["integer", "string"],
                        "description": "Numeric project ID or full 'namespace/project' path"
                    },
                    "page": {
                        "type": "integer",
                        "minimum": 1,
                        "description": "Page number"
                    },
                    "per_page": {
                        "type": "integer",
                        "minimum": 1,
                        "maximum": 100,
                        "description": "Number of deployments per page"
                    },
                    "order_by": {
                        "type": "string",
                        "enum": ["id", "iid", "created_at", "updated_at", "ref"],
                        "description": "Field to order deployments by"
                    },
                    "sort": {
                        "type": "string",
                        "enum": ["asc", "desc"],
                        "description": "Sort direction"
                    },
                    "search": {
                        "type": "string",
                        "description": "Free-text filter"
                    }
                },
                "required": ["project_id"]
            }
        ),
    ]


async def call_list_deployments(service: DeploymentsService, arguments: Dict[str, Any]) -> List[TextContent]:
    """Run the list_deployments tool against an already built service."""
    project_id = arguments["project_id"]
    opt = ListDeploymentsOptions(
        **{key: arguments[key] for key in OPTION_KEYS if arguments.get(key) is not None}
    )

    deployments, meta = await service.list_deployments(project_id, opt)

    payload = {
        "project_id": project_id,
        "count": len(deployments),
        "total": meta.total_items,
        "page": meta.current_page,
        "next_page": meta.next_page,
        "deployments": [deployment.to_json() for deployment in deployments],
    }
    return [TextContent(type="text", text=json.dumps(payload, indent=2))]


@server.call_tool()
async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
    logger.info(f"🔧 Tool called: {name} with arguments: {arguments}")

    try:
        if name == "list_deployments":
            async with GitLabClient() as client:
                return await call_list_deployments(DeploymentsService(client), arguments)

        return [TextContent(type="text", text=f"❌ Unknown tool: {name}")]

    # pydantic.ValidationError is a ValueError
    except (GitLabError, KeyError, ValueError) as e:
        logger.error(f"❌ Error executing tool {name}: {e}")
        return [TextContent(type="text", text=f"❌ Error executing {name}: {e}")]


async def main():
    """Main entry point for the MCP server."""
    logger.info("🚀 Starting GitLab Deployments MCP Server...")
    logger.info(f"   - GitLab API: {settings.GITLAB_BASE_URL}")
    logger.info("   - Protocol: MCP over stdio")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="gitlab-deployments",
                server_version=__version__,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


if __name__ == "__main__":
    asyncio.run(main())
