from __future__ import annotations

import logging
import os

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from .errors import LPFacadeError
from .model import Model
from .schemas import LPModel, SolveOptions

logger = logging.getLogger(__name__)

app = FastMCP("LP Facade")


@app.tool()
def solve_linear_program(model: LPModel, options: SolveOptions | None = None) -> dict:
    """
    Build a linear program through the model facade and solve it with HiGHS.

    Args:
        model: Variables with bounds, linear constraints and a linear objective
            with its sense ('max' or 'min').
        options: Optional solver options.

    Returns:
        The solution as JSON (status, objective_value, x, reduced_costs, duals),
        or a dictionary with an 'error' key when the model is invalid or the
        solver fails.
    """
    try:
        lp = Model.from_schema(model)
        solution = lp.solve(options or SolveOptions())
    except LPFacadeError as exc:
        logger.warning("solve_linear_program failed: %s", exc)
        return {"error": str(exc), "solution": None}
    return solution.model_dump()


def main() -> None:
    # stdio for desktop clients, streamable HTTP otherwise
    transport = os.environ.get("MCP_TRANSPORT", "stdio")
    if transport == "stdio":
        app.run(transport="stdio")
        return

    app.settings.host = "0.0.0.0"
    app.settings.port = int(os.environ.get("PORT", "8081"))
    app.settings.streamable_http_path = "/mcp"
    app.settings.transport_security = TransportSecuritySettings(
        enable_dns_rebinding_protection=False,
        allowed_hosts=["*"],
        allowed_origins=["*"],
    )
    app.run(transport="streamable-http")


if __name__ == "__main__":
    main()
