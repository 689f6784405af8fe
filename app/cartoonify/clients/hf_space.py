"""
Hugging Face Space Generator for Cartoonify.
Calls a Gradio Space (e.g. AnimeGANv2) instead of a prompt-driven edit API.

Required Environment Variables:
    HF_SPACE_CARTOON_URL: Space predict URL
    HF_TOKEN: Hugging Face access token
Optional:
    HF_SPACE_UPSCALE_URL: second Space (e.g. Real-ESRGAN) run on large requests
"""
import logging
import time
from typing import Any, Optional, Tuple

import requests

from ..errors import CartoonifyError
from ..images import parse_data_url
from .base import BaseGenerator, GenerationRequest, GeneratorResult, TargetSize, error_message

logger = logging.getLogger(__name__)


class HFSpaceGenerator(BaseGenerator):
    """
    Gradio Space image generator.

    The Space applies a fixed style, so the prompt is not sent. Target
    size only decides whether the optional upscale pass runs.
    """

    name = "hf_space"

    ENV_SPACE_URL = "HF_SPACE_CARTOON_URL"
    ENV_TOKEN = "HF_TOKEN"

    def __init__(
        self,
        space_url: Optional[str],
        token: Optional[str],
        upscale_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(timeout)
        self.space_url = space_url
        self.token = token
        self.upscale_url = upscale_url

    def get_missing_config(self) -> list:
        missing = []
        if not self.space_url:
            missing.append(self.ENV_SPACE_URL)
        if not self.token:
            missing.append(self.ENV_TOKEN)
        return missing

    def _predict(self, url: str, value: Any) -> Tuple[requests.Response, Optional[Any]]:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        response = requests.post(url, headers=headers, json={"data": [value]}, timeout=self.timeout)
        if not response.ok:
            return response, None
        payload = response.json()
        outputs = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(outputs, list) or not outputs:
            return response, None
        return response, outputs[0]

    def _read_output(self, output: Any) -> Optional[bytes]:
        """Gradio returns a data-URL, a plain URL or a file dict with a 'url'."""
        if isinstance(output, dict):
            output = output.get("url")
        if not isinstance(output, str) or not output:
            return None
        if output.startswith("data:"):
            try:
                return parse_data_url(output).data
            except CartoonifyError as e:
                logger.error(f"Space returned an unusable data URL: {e}")
                return None
        img_resp = requests.get(output, timeout=self.timeout)
        img_resp.raise_for_status()
        return img_resp.content

    def generate(self, request: GenerationRequest) -> GeneratorResult:
        start_time = time.time()
        req_info = f"POST {self.space_url}\nSize: {request.target_size.value}"
        resp_info = ""

        try:
            logger.info(f"Submitting Space request for {request.artifact.filename}...")
            response, output = self._predict(self.space_url, request.artifact.to_data_url())
            latency = time.time() - start_time
            resp_info = f"Status: {response.status_code}\nLatency: {latency:.2f}s"

            if not response.ok:
                message = error_message(response)
                logger.error(f"Space Error ({response.status_code}): {message}")
                return GeneratorResult(None, response.status_code, message, req_info, resp_info)

            if output is None:
                return GeneratorResult(None, response.status_code, None, req_info, resp_info + "\nError: No image from Space")

            # Upscale is optional; its failure keeps the first-pass output
            if self.upscale_url and request.target_size == TargetSize.LARGE:
                try:
                    up_response, upscaled = self._predict(self.upscale_url, output)
                    if up_response.ok and upscaled:
                        output = upscaled
                    else:
                        logger.warning(f"Upscale Space returned {up_response.status_code}, keeping first pass")
                except (requests.exceptions.RequestException, ValueError) as e:
                    logger.warning(f"Upscale failed, keeping first pass: {e}")

            result_data = self._read_output(output)
            if result_data:
                return GeneratorResult(data=result_data, request_info=req_info, response_info=resp_info)
            return GeneratorResult(None, response.status_code, None, req_info, resp_info + "\nError: Unreadable output")

        except ValueError:
            logger.error("Space returned malformed JSON")
            return GeneratorResult(None, None, "Malformed JSON from Space", req_info, resp_info)

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"Error downloading Space result: {e}")
            return GeneratorResult(None, status, f"HTTP Error: {e}", req_info, resp_info)

        except requests.exceptions.RequestException as e:
            logger.error(f"Space request failed: {e}")
            return GeneratorResult(None, None, f"Request failed: {e}", req_info, resp_info)
