from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from deploytree.models import DeploymentTreeResponse, ErrorResponse
from deploytree.render import render_tree_text, tree_to_dict
from deploytree.services.tree_service import load_deployment_tree

router = APIRouter(
    prefix="/sites/{site_id}/deployments/{deployment_id}",
    tags=["deployments"],
)

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


@router.get("/tree", response_model=DeploymentTreeResponse, responses=ERROR_RESPONSES)
async def deployment_tree(site_id: str, deployment_id: str) -> DeploymentTreeResponse:
    tree = await load_deployment_tree(site_id, deployment_id)
    return DeploymentTreeResponse(
        site_id=site_id,
        deployment_id=deployment_id,
        root=tree_to_dict(tree.root),
        stats=tree.stats,
        skipped=tree.skipped,
        collisions=tree.collisions,
    )


@router.get("/tree.txt", response_class=PlainTextResponse, responses=ERROR_RESPONSES)
async def deployment_tree_text(site_id: str, deployment_id: str) -> str:
    tree = await load_deployment_tree(site_id, deployment_id)
    return render_tree_text(tree.root)
