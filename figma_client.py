# figma_client.py

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import requests

from transform import parse_figma_response

logger = logging.getLogger(__name__)


class FigmaAPIError(Exception):
    def __init__(self, message: str, status: Optional[int] = None, path: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.path = path


def download_image(image_url: str, local_path: str, file_name: str, session=None) -> str:
    """Fetch ``image_url`` into ``local_path/file_name`` and return the written path."""
    if not file_name or Path(file_name).name != file_name or "\\" in file_name or file_name in (".", ".."):
        raise ValueError(f"Invalid image file name '{file_name}'")
    target_dir = Path(local_path)
    target_dir.mkdir(parents=True, exist_ok=True)

    getter = session or requests
    response = getter.get(image_url, stream=True)
    response.raise_for_status()

    file_path = target_dir / file_name
    with open(file_path, "wb") as f:
        for chunk in response.iter_content(chunk_size=8192):
            f.write(chunk)
    return str(file_path)


class FigmaService:
    """Thin wrapper around the Figma REST endpoints the tools need."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, api_key: Optional[str] = None, oauth_token: Optional[str] = None, session=None):
        self.session = session or requests.Session()
        if oauth_token:
            self.session.headers.update({"Authorization": f"Bearer {oauth_token}"})
        elif api_key:
            self.session.headers.update({"X-Figma-Token": api_key})

    @classmethod
    def from_settings(cls, settings) -> "FigmaService":
        return cls(api_key=settings.figma_api_key, oauth_token=settings.figma_oauth_token)

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        url = f"{self.BASE_URL}{path}"
        logger.debug("GET %s params=%s", url, params)
        res = self.session.get(url, params=params)
        try:
            res.raise_for_status()
        except requests.HTTPError as e:
            raise FigmaAPIError(f"Figma API request to {path} failed: {e}", res.status_code, path) from e
        return res.json()

    # ---- document ----

    def get_raw_file(self, file_key: str, depth: Optional[int] = None) -> dict:
        params = {"depth": depth} if depth else None
        return self._get(f"/files/{file_key}", params=params)

    def get_raw_node(self, file_key: str, node_id: str, depth: Optional[int] = None) -> dict:
        params = {"ids": node_id}
        if depth:
            params["depth"] = depth
        return self._get(f"/files/{file_key}/nodes", params=params)

    def get_file(self, file_key: str, depth: Optional[int] = None) -> dict:
        raw = self.get_raw_file(file_key, depth)
        logger.info("Converting file %s (%s)", file_key, raw.get("name"))
        return parse_figma_response(raw)

    def get_node(self, file_key: str, node_id: str, depth: Optional[int] = None) -> dict:
        raw = self.get_raw_node(file_key, node_id, depth)
        logger.info("Converting node %s of file %s", node_id, file_key)
        return parse_figma_response(raw)

    # ---- images ----

    def get_image_fill_urls(self, file_key: str) -> dict:
        result = self._get(f"/files/{file_key}/images")
        return (result.get("meta") or {}).get("images") or {}

    def get_image_urls(self, file_key: str, node_ids: List[str], format: str = "png", scale: float = 2) -> dict:
        params = {"ids": ",".join(node_ids), "format": format}
        if format == "png":
            params["scale"] = scale
        result = self._get(f"/images/{file_key}", params=params)
        return result.get("images") or {}

    def _download_all(self, urls: dict, requests_: Iterable[dict], key: str, local_path: str) -> List[str]:
        saved = []
        for item in requests_:
            image_url = urls.get(item[key])
            if not image_url:
                logger.warning("No image URL for %s %s, skipping", key, item[key])
                continue
            try:
                saved.append(download_image(image_url, local_path, item["fileName"]))
            except (requests.RequestException, OSError, ValueError) as e:
                logger.warning("Failed to download %s: %s", item["fileName"], e)
        return saved

    def get_image_fills(self, file_key: str, nodes: List[dict], local_path: str) -> List[str]:
        """Download image fills, looked up by ``imageRef``."""
        if not nodes:
            return []
        urls = self.get_image_fill_urls(file_key)
        return self._download_all(urls, nodes, "imageRef", local_path)

    def get_images(self, file_key: str, nodes: List[dict], local_path: str, scale: float = 2) -> List[str]:
        """Render nodes to svg or png, looked up by ``nodeId``."""
        saved = []
        for fmt in ("svg", "png"):
            batch = [n for n in nodes if n.get("fileType", "png") == fmt]
            if not batch:
                continue
            urls = self.get_image_urls(file_key, [n["nodeId"] for n in batch], format=fmt, scale=scale)
            saved.extend(self._download_all(urls, batch, "nodeId", local_path))
        return saved
