from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from jinja2 import TemplateError
from pydantic import BaseModel, Field

from .attribute import to_jsonable
from .templating import render_fields


class SearchBody(BaseModel):
    requested_fields: List[str] = Field(default_factory=list, alias="fields")
    filter: Dict[str, Optional[str]] = {}
    variables: Dict[str, Any] = {}


def create_app(connector: Any) -> FastAPI:
    """Expose a configured connector over HTTP."""
    app = FastAPI(title="ldapsource")

    @app.get("/descriptor")
    def descriptor():
        return connector.get_source_descriptor().to_dict()

    @app.get("/fields")
    def fields():
        return {"fields": connector.get_available_fields()}

    @app.get("/health")
    def health():
        return {"available": connector.test_connection()}

    @app.post("/search")
    def search(body: SearchBody):
        errors = connector.get_source_descriptor().filter_descriptor.validate(body.filter)
        if errors:
            return JSONResponse({"errors": errors}, status_code=422)
        try:
            rendered = render_fields(body.filter, body.variables)
        except TemplateError as e:
            return JSONResponse({"errors": [str(e)]}, status_code=422)
        values = connector.retrieve_values(body.requested_fields, rendered)
        return to_jsonable(values)

    return app
