"""REST API controllers for workflow management.

This module provides two controller classes:
- WorkflowDefinitionController: Create, list and inspect workflow definitions,
  and start instances of them
- WorkflowInstanceController: Inspect instances and execute actions on them
"""

from __future__ import annotations

from typing import Any, ClassVar
from urllib.parse import quote

from litestar import Controller, Request, Response, get, post
from litestar.params import Parameter
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED, HTTP_400_BAD_REQUEST

from litestar_fsm.core.graph import DefinitionGraph
from litestar_fsm.engine.local import TransitionEngine  # noqa: TC001 - needed for DI
from litestar_fsm.exceptions import WorkflowsError
from litestar_fsm.web.dto import ActionDTO, GraphDTO, WorkflowDefinitionDTO, WorkflowInstanceDTO
from litestar_fsm.web.exceptions import to_http_exception

__all__ = [
    "WorkflowDefinitionController",
    "WorkflowInstanceController",
]


class WorkflowDefinitionController(Controller):
    """API controller for workflow definitions.

    Provides endpoints for submitting and retrieving workflow definitions,
    their graph visualizations, and for starting new instances.

    Tags: Workflow Definitions
    """

    path = "/workflows"
    tags: ClassVar[list[str]] = ["Workflow Definitions"]

    @post("/", name="fsm:create_definition", status_code=HTTP_201_CREATED)
    async def create_definition(
        self,
        request: Request[Any, Any, Any],
        data: WorkflowDefinitionDTO,
        workflow_engine: TransitionEngine,
    ) -> Response[WorkflowDefinitionDTO]:
        """Create a new workflow definition.

        The definition must declare exactly one initial state and use an
        identifier that is not already taken.

        Args:
            request: The current request.
            data: The submitted definition.
            workflow_engine: Injected transition engine.

        Returns:
            The stored definition, with a Location header pointing at it.

        Raises:
            ClientException: If the definition is rejected.
        """
        # Built before storing so a header failure cannot leave the definition admitted.
        location = request.app.route_reverse("fsm:get_definition", definition_id=quote(data.id, safe=""))

        try:
            definition = workflow_engine.create_definition(data.to_model())
        except WorkflowsError as e:
            raise to_http_exception(e) from e

        return Response(
            content=WorkflowDefinitionDTO.from_model(definition),
            status_code=HTTP_201_CREATED,
            headers={"Location": location},
        )

    @get("/", name="fsm:list_definitions")
    async def list_definitions(self, workflow_engine: TransitionEngine) -> list[WorkflowDefinitionDTO]:
        """List all workflow definitions in submission order."""
        return [WorkflowDefinitionDTO.from_model(d) for d in workflow_engine.list_definitions()]

    @get("/{definition_id:str}", name="fsm:get_definition")
    async def get_definition(self, definition_id: str, workflow_engine: TransitionEngine) -> WorkflowDefinitionDTO:
        """Get a specific workflow definition.

        Args:
            definition_id: The definition identifier.
            workflow_engine: Injected transition engine.

        Returns:
            Workflow definition DTO.

        Raises:
            NotFoundException: If the definition is not found.
        """
        try:
            definition = workflow_engine.get_definition(definition_id)
        except WorkflowsError as e:
            raise to_http_exception(e) from e

        return WorkflowDefinitionDTO.from_model(definition)

    @get("/{definition_id:str}/graph", name="fsm:get_definition_graph")
    async def get_definition_graph(self, definition_id: str, workflow_engine: TransitionEngine) -> GraphDTO:
        """Get the definition's state diagram.

        Returns MermaidJS source along with the nodes and edges it was built
        from. Nodes report whether they are reachable from the initial state.

        Raises:
            NotFoundException: If the definition is not found.
        """
        try:
            definition = workflow_engine.get_definition(definition_id)
        except WorkflowsError as e:
            raise to_http_exception(e) from e

        graph = DefinitionGraph.from_definition(definition)
        return GraphDTO.from_graph_dict(graph.to_mermaid(), graph.to_dict())

    @post("/{definition_id:str}/instances", name="fsm:create_instance", status_code=HTTP_201_CREATED)
    async def create_instance(
        self,
        request: Request[Any, Any, Any],
        definition_id: str,
        workflow_engine: TransitionEngine,
    ) -> Response[WorkflowInstanceDTO]:
        """Start a new instance of a workflow definition.

        The instance starts in the definition's initial state with an empty
        history.

        Args:
            request: The current request.
            definition_id: The definition to instantiate.
            workflow_engine: Injected transition engine.

        Returns:
            The new instance, with a Location header pointing at it.

        Raises:
            NotFoundException: If the definition is not found.
        """
        try:
            instance = workflow_engine.create_instance(definition_id)
        except WorkflowsError as e:
            raise to_http_exception(e) from e

        return Response(
            content=WorkflowInstanceDTO.from_model(instance),
            status_code=HTTP_201_CREATED,
            headers={"Location": request.app.route_reverse("fsm:get_instance", instance_id=str(instance.id))},
        )


class WorkflowInstanceController(Controller):
    """API controller for workflow instances.

    Provides endpoints for inspecting instances and driving them forward by
    executing actions.

    Tags: Workflow Instances
    """

    path = "/instances"
    tags: ClassVar[list[str]] = ["Workflow Instances"]

    @get("/", name="fsm:list_instances")
    async def list_instances(
        self,
        workflow_engine: TransitionEngine,
        definition_id: str | None = Parameter(
            query="definitionId",
            default=None,
            description="Filter by workflow definition",
        ),
    ) -> list[WorkflowInstanceDTO]:
        """List workflow instances in creation order.

        Args:
            workflow_engine: Injected transition engine.
            definition_id: Optional definition filter.

        Returns:
            List of workflow instance DTOs.
        """
        return [WorkflowInstanceDTO.from_model(i) for i in workflow_engine.list_instances(definition_id)]

    @get("/{instance_id:str}", name="fsm:get_instance")
    async def get_instance(self, instance_id: str, workflow_engine: TransitionEngine) -> WorkflowInstanceDTO:
        """Get an instance with its full history.

        Raises:
            NotFoundException: If the instance is not found.
        """
        try:
            instance = workflow_engine.get_instance(instance_id)
        except WorkflowsError as e:
            raise to_http_exception(e) from e

        return WorkflowInstanceDTO.from_model(instance)

    @get("/{instance_id:str}/actions", name="fsm:list_available_actions")
    async def list_available_actions(self, instance_id: str, workflow_engine: TransitionEngine) -> list[ActionDTO]:
        """List the actions that can currently be executed on an instance.

        Raises:
            NotFoundException: If the instance is not found.
        """
        try:
            actions = workflow_engine.available_actions(instance_id)
        except WorkflowsError as e:
            raise to_http_exception(e) from e

        return [ActionDTO.from_model(action) for action in actions]

    @get("/{instance_id:str}/graph", name="fsm:get_instance_graph")
    async def get_instance_graph(self, instance_id: str, workflow_engine: TransitionEngine) -> GraphDTO:
        """Get the instance's state diagram with its current state highlighted.

        Raises:
            NotFoundException: If the instance is not found.
        """
        try:
            graph, current_state = workflow_engine.get_instance_graph(instance_id)
        except WorkflowsError as e:
            raise to_http_exception(e) from e

        return GraphDTO.from_graph_dict(graph.to_mermaid(current_state=current_state), graph.to_dict())

    @post("/{instance_id:str}/actions/{action_id:str}", name="fsm:execute_action", status_code=HTTP_200_OK)
    async def execute_action(
        self,
        instance_id: str,
        action_id: str,
        workflow_engine: TransitionEngine,
    ) -> WorkflowInstanceDTO:
        """Execute an action on an instance.

        Args:
            instance_id: The instance to move.
            action_id: The action to execute.
            workflow_engine: Injected transition engine.

        Returns:
            The updated instance.

        Raises:
            ClientException: If the instance or the action is unknown.
            ConflictException: If the instance is in a final or unknown state,
                or the action is not allowed from its current state.
            InternalServerException: If the instance's definition is missing.
        """
        try:
            instance = workflow_engine.execute_action(instance_id, action_id)
        except WorkflowsError as e:
            raise to_http_exception(e, instance_not_found_status=HTTP_400_BAD_REQUEST) from e

        return WorkflowInstanceDTO.from_model(instance)
