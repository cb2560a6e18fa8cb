"""Workflow API endpoints for definitions, instances and action execution."""

from typing import Dict, Type

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from ..models.workflow import (
    DefinitionCreatedResponse,
    DefinitionListResponse,
    InstanceListResponse,
    WorkflowDefinition,
    WorkflowInstance,
)
from ..workflows.engine import WorkflowEngine
from ..workflows.errors import (
    ActionDisabledError,
    AlreadyExistsError,
    DefinitionValidationError,
    IllegalTransitionError,
    InternalInconsistencyError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    WorkflowEngineError,
)

router = APIRouter(tags=["workflows"])

ERROR_STATUS: Dict[Type[WorkflowEngineError], int] = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    DefinitionValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AlreadyExistsError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ActionDisabledError: status.HTTP_409_CONFLICT,
    IllegalTransitionError: status.HTTP_409_CONFLICT,
    InvalidStateError: status.HTTP_409_CONFLICT,
    InternalInconsistencyError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_workflow_engine(request: Request) -> WorkflowEngine:
    """Return the engine owned by the running application."""
    return request.app.state.workflow_engine


def to_http_exception(error: WorkflowEngineError) -> HTTPException:
    """Translate an engine failure into an HTTP error response."""
    status_code = ERROR_STATUS.get(
        type(error), status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return HTTPException(status_code=status_code, detail=error.to_dict())


@router.get("/", response_class=PlainTextResponse, summary="Liveness message")
def root() -> str:
    """Plain-text liveness message."""
    return "Workflow API is running"


@router.post(
    "/definition",
    response_model=DefinitionCreatedResponse,
    summary="Create a new workflow definition",
)
def create_definition(
    definition: WorkflowDefinition,
    engine: WorkflowEngine = Depends(get_workflow_engine),
) -> DefinitionCreatedResponse:
    """
    Create a workflow definition.

    Example definition:
    ```json
    {
      "id": "doc",
      "states": [
        {"id": "draft", "isInitial": true, "enabled": true},
        {"id": "review", "enabled": true},
        {"id": "done", "isFinal": true, "enabled": true}
      ],
      "actions": [
        {"id": "submit", "fromStates": ["draft"], "toState": "review"},
        {"id": "approve", "fromStates": ["review"], "toState": "done"}
      ]
    }
    ```
    """
    try:
        definition_id = engine.create_definition(definition)
    except WorkflowEngineError as e:
        raise to_http_exception(e)

    return DefinitionCreatedResponse(definition_id=definition_id)


@router.get(
    "/definition/{definition_id}",
    response_model=WorkflowDefinition,
    summary="Get a workflow definition",
)
def get_definition(
    definition_id: str, engine: WorkflowEngine = Depends(get_workflow_engine)
) -> WorkflowDefinition:
    try:
        return engine.get_definition(definition_id)
    except WorkflowEngineError as e:
        raise to_http_exception(e)


@router.get(
    "/definitions",
    response_model=DefinitionListResponse,
    summary="List workflow definitions",
)
def list_definitions(
    engine: WorkflowEngine = Depends(get_workflow_engine),
) -> DefinitionListResponse:
    definitions = engine.list_definitions()
    return DefinitionListResponse(total=len(definitions), definitions=definitions)


@router.post(
    "/instance/{definition_id}",
    response_model=WorkflowInstance,
    summary="Start a new workflow instance",
)
def start_instance(
    definition_id: str, engine: WorkflowEngine = Depends(get_workflow_engine)
) -> WorkflowInstance:
    """Start an instance in the definition's enabled initial state."""
    try:
        return engine.start_instance(definition_id)
    except WorkflowEngineError as e:
        raise to_http_exception(e)


@router.post(
    "/instance/{instance_id}/action/{action_id}",
    response_model=WorkflowInstance,
    summary="Execute an action on an instance",
)
def execute_action(
    instance_id: str,
    action_id: str,
    engine: WorkflowEngine = Depends(get_workflow_engine),
) -> WorkflowInstance:
    """
    Execute an action, moving the instance to the action's target state.

    Fails without changing the instance when the action is unknown or
    disabled, the current state is final or not one of the action's source
    states, or the target state is disabled.
    """
    try:
        return engine.execute_action(instance_id, action_id)
    except WorkflowEngineError as e:
        raise to_http_exception(e)


@router.get(
    "/instance/{instance_id}",
    response_model=WorkflowInstance,
    summary="Get instance state and history",
)
def get_instance(
    instance_id: str, engine: WorkflowEngine = Depends(get_workflow_engine)
) -> WorkflowInstance:
    try:
        return engine.get_instance(instance_id)
    except WorkflowEngineError as e:
        raise to_http_exception(e)


@router.get(
    "/instances",
    response_model=InstanceListResponse,
    summary="List workflow instances",
)
def list_instances(
    engine: WorkflowEngine = Depends(get_workflow_engine),
) -> InstanceListResponse:
    instances = engine.list_instances()
    return InstanceListResponse(total=len(instances), instances=instances)
