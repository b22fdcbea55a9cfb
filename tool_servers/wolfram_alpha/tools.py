from __future__ import annotations

import logging
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from tool_servers.dispatch import ToolDispatcher
from tool_servers.wolfram_alpha.client import QueryOptions

WOLFRAM_QUERY = "wolfram_query"
SHOW_STEPS_PREFIX = "show steps "

DESCRIPTION = """Execute a Wolfram Alpha query to perform calculations or retrieve knowledge.
This leverages the high-precision Wolfram Alpha API engine to handle numerical calculations and symbolic computations, tasks where LLMs might struggle or produce uncertain results on their own. This allows the LLM to avoid computational errors and focus on delivering reliable information to the user.
For instance, it is effective not only for mathematical calculations like complex arithmetic operations, solving algebraic equations, and calculus, but also for referencing scientific knowledge and factual data such as physical constants, chemical properties, statistical data, and geographical information. Attempting these tasks internally within the LLM can lead to inefficient token consumption. Except for very simple calculations, when computation or accurate data retrieval is required, actively utilize this function to optimize token consumption and maximize the LLM's core capabilities."""


class WolframQueryArgs(BaseModel):
    query: str = Field(..., description="The Wolfram Alpha query to execute")
    max_chars: int = Field(0, description="Maximum characters in response (default: 2000)")
    units: str = Field(
        "",
        description="Unit system to use (metric or nonmetric)",
        json_schema_extra={"enum": ["metric", "nonmetric"]},
    )
    country_code: str = Field("", description="Country code for localization (e.g., 'JP')")
    language_code: str = Field("", description="Language code for localization (e.g., 'ja')")
    show_steps: bool = Field(False, description="Request step-by-step solution for math problems")


class WolframQueryer(Protocol):
    def execute_query(self, query: str, options: Optional[QueryOptions] = None) -> str: ...


def build_query(args: WolframQueryArgs) -> str:
    # The API's own syntax for step-by-step solutions.
    if args.show_steps:
        return SHOW_STEPS_PREFIX + args.query
    return args.query


def register_wolfram_query_tool(dispatcher: ToolDispatcher, queryer: WolframQueryer,
                                logger: logging.Logger) -> None:
    logger.info("registering %s tool", WOLFRAM_QUERY)

    @dispatcher.tool(WOLFRAM_QUERY, DESCRIPTION, WolframQueryArgs)
    def wolfram_query(args: WolframQueryArgs) -> str:
        logger.debug(
            "executing %s tool: query=%r max_chars=%d units=%r country_code=%r language_code=%r show_steps=%s",
            WOLFRAM_QUERY, args.query, args.max_chars, args.units,
            args.country_code, args.language_code, args.show_steps,
        )
        options = QueryOptions(
            max_chars=args.max_chars,
            units=args.units,
            country_code=args.country_code,
            language_code=args.language_code,
        )
        return queryer.execute_query(build_query(args), options)


def register_all_tools(dispatcher: ToolDispatcher, queryer: WolframQueryer, logger: logging.Logger) -> None:
    logger.info("registering all tools")
    register_wolfram_query_tool(dispatcher, queryer, logger)
    logger.info("all tools registered successfully")
