# figma_tools.py

import json
import logging
import sys
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from config import ConfigError, load_settings, require_credentials
from figma_client import FigmaService
from mcp_server import mcp

logger = logging.getLogger(__name__)

_service = None


class ImageNode(BaseModel):
    nodeId: str = Field(description="The ID of the Figma image node to fetch, formatted as 1234:5678")
    imageRef: Optional[str] = Field(
        default=None,
        description="If a node has an imageRef fill, you must include this variable. "
                    "Leave blank when downloading Vector SVG images.",
    )
    fileName: str = Field(description="The local name for saving the fetched file")


def get_service() -> FigmaService:
    global _service
    if _service is None:
        settings = load_settings()
        require_credentials(settings)
        _service = FigmaService.from_settings(settings)
    return _service


def normalize_node_id(node_id: str) -> str:
    # node ids come from URLs as 1-2, the API wants 1:2
    return node_id.replace("-", ":")


def serialize_design(design: dict, output_format: str = "yaml") -> str:
    result = {
        "metadata": {
            "name": design.get("name"),
            "lastModified": design.get("lastModified"),
            "thumbnailUrl": design.get("thumbnailUrl"),
        },
        "nodes": design.get("nodes", []),
        "globalVars": design.get("globalVars", {"styles": {}}),
        "imageAssets": design.get("imageAssets", []),
    }
    if output_format == "json":
        return json.dumps(result, indent=2, ensure_ascii=False)
    return yaml.safe_dump(result, sort_keys=False, allow_unicode=True)


def fetch_figma_data(service: FigmaService, fileKey: str, nodeId: Optional[str] = None, depth: Optional[int] = None,
                     output_format: str = "yaml"):
    try:
        logger.info(
            "Fetching %s of %s %s",
            f"{depth} layers deep" if depth else "all layers",
            f"node {nodeId} from file" if nodeId else "full file",
            fileKey,
        )
        if nodeId:
            design = service.get_node(fileKey, normalize_node_id(nodeId), depth)
        else:
            design = service.get_file(fileKey, depth)

        logger.info("Successfully fetched file: %s", design.get("name"))
        return serialize_design(design, output_format)

    except Exception as e:
        logger.error("Error fetching file %s: %s", fileKey, e)
        return {"error": f"Failed to process Figma data: {e}"}


def download_images(service: FigmaService, fileKey: str, nodes: List[ImageNode], localPath: str,
                    scale: float = 2):
    try:
        fills = [
            {"nodeId": n.nodeId, "imageRef": n.imageRef, "fileName": n.fileName}
            for n in nodes if n.imageRef
        ]
        renders = [
            {
                "nodeId": normalize_node_id(n.nodeId),
                "fileName": n.fileName,
                "fileType": "svg" if n.fileName.endswith(".svg") else "png",
            }
            for n in nodes if not n.imageRef
        ]

        downloaded = service.get_image_fills(fileKey, fills, localPath)
        downloaded += service.get_images(fileKey, renders, localPath, scale)

        skipped = len(nodes) - len(downloaded)
        if skipped > 0:
            logger.warning("Downloaded %d of %d images from %s", len(downloaded), len(nodes), fileKey)
            return (f"Partial, {len(downloaded)} of {len(nodes)} images downloaded, {skipped} skipped: "
                    f"{', '.join(downloaded)}")
        return f"Success, {len(downloaded)} images downloaded: {', '.join(downloaded)}"

    except Exception as e:
        logger.error("Error downloading images from file %s: %s", fileKey, e)
        return {"error": f"Failed to download images: {e}"}


@mcp.tool(
    name="get_figma_data",
    description="""
    When the nodeId cannot be obtained, obtain the layout information about the entire Figma file.

    Returns a simplified layout/style tree with shared styles under globalVars
    and downloadable images under imageAssets.
    """
)
def get_figma_data(fileKey: str, nodeId: Optional[str] = None, depth: Optional[int] = None):
    try:
        service = get_service()
    except ConfigError as e:
        return {"error": str(e)}
    return fetch_figma_data(service, fileKey, nodeId, depth, load_settings().output_format)


@mcp.tool(
    name="download_figma_images",
    description="""
    Download SVG and PNG images used in a Figma file based on the IDs of image or icon nodes.

    Use the imageAssets list returned by get_figma_data to fill in `nodes`.
    """
)
def download_figma_images(fileKey: str, nodes: List[ImageNode], localPath: str, scale: float = 2):
    try:
        service = get_service()
    except ConfigError as e:
        return {"error": str(e)}
    return download_images(service, fileKey, nodes, localPath, scale)


def main():
    settings = load_settings()
    # stdout carries the stdio transport
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.transport == "http":
        mcp.run(transport="http", port=settings.port)
    else:
        mcp.run()


if __name__ == "__main__":
    main()
