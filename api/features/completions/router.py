"""Router for the Completions feature."""
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from api.features.completions.controller import CompletionController
from api.features.completions.dtos import (
    CompletionRequest,
    CompletionResponse,
    ProvidersResponse,
)
from di.container import ApplicationContainer as DependencyContainer

router = APIRouter()


@router.post("/chat", response_model=CompletionResponse)
@inject
async def complete(
    request: CompletionRequest,
    controller: CompletionController = Depends(
        Provide[DependencyContainer.controllers.completion_controller]
    ),
):
    """Answer the last user turn of a supplied conversation."""
    return await controller.complete(request)


@router.get("/providers", response_model=ProvidersResponse)
@inject
async def list_providers(
    controller: CompletionController = Depends(
        Provide[DependencyContainer.controllers.completion_controller]
    ),
):
    return controller.list_providers()
