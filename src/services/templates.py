"""
HTML template management utilities.

This module loads page templates with the following priority:
1. S3 override (optional, for runtime updates without redeploy)
2. Local filesystem (templates/ directory packaged with Lambda)

Templates use $placeholder substitution; substituted values are HTML-escaped.
"""

import html
import logging
import os
from pathlib import Path
from string import Template
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from domain.models import TemplateLoadError

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = '.tmpl.html'

# Configure S3 client with timeouts to prevent infinite hangs
s3_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=10,  # 10 seconds to establish connection
    read_timeout=30      # 30 seconds max for reading templates
)

# Initialize S3 client at module level (thread-safe, reused)
s3_client = boto3.client('s3', config=s3_config)

# Configuration from environment variables
TEMPLATE_BUCKET = os.environ.get('TEMPLATE_BUCKET')
TEMPLATE_KEY_PREFIX = os.environ.get('TEMPLATE_KEY_PREFIX', 'templates/')

# Path to templates directory (relative to this file)
# src/services/templates.py -> src/templates/
# In Lambda: /var/task/templates/
TEMPLATES_DIR = Path(__file__).parent.parent / 'templates'


def _template_filename(template_name: str) -> str:
    return f"{template_name}{TEMPLATE_SUFFIX}"


def _load_from_filesystem(template_name: str) -> str:
    """
    Load template from the bundled templates directory.

    Args:
        template_name: Template name without suffix

    Returns:
        str: Template source

    Raises:
        FileNotFoundError: If template file doesn't exist
    """
    template_path = TEMPLATES_DIR / _template_filename(template_name)
    logger.info(f"Loading template from filesystem: {template_path}")

    with open(template_path, 'r', encoding='utf-8') as f:
        content = f.read()

    logger.info(f"Loaded template from filesystem: {len(content)} characters")
    return content


def _load_from_s3(template_name: str) -> str:
    """
    Load template from S3 (optional override).

    Args:
        template_name: Template name without suffix

    Returns:
        str: Template source

    Raises:
        ValueError: If TEMPLATE_BUCKET not set
        ClientError: If the S3 object cannot be fetched
    """
    if not TEMPLATE_BUCKET:
        raise ValueError("TEMPLATE_BUCKET environment variable not set")

    s3_key = f"{TEMPLATE_KEY_PREFIX}{_template_filename(template_name)}"
    logger.info(f"Loading template from S3: s3://{TEMPLATE_BUCKET}/{s3_key}")

    response = s3_client.get_object(
        Bucket=TEMPLATE_BUCKET,
        Key=s3_key
    )

    content = response['Body'].read().decode('utf-8')
    logger.info(f"Loaded template from S3: {len(content)} characters")
    return content


def load_template(template_name: str) -> str:
    """
    Load template source with S3 override and filesystem fallback.

    Args:
        template_name: Template name without suffix (e.g., "unsubscribe-successful")

    Returns:
        str: Template source

    Raises:
        TemplateLoadError: If the template cannot be found or read
    """
    if TEMPLATE_BUCKET:
        try:
            content = _load_from_s3(template_name)
            logger.info(f"Using S3 override for template: {template_name}")
            return content
        except (ClientError, BotoCoreError, UnicodeDecodeError, ValueError) as e:
            logger.info(
                f"S3 override not available ({e.__class__.__name__}), "
                f"falling back to local filesystem"
            )

    try:
        return _load_from_filesystem(template_name)
    except FileNotFoundError as e:
        logger.error(
            f"Template not found: {template_name}. "
            f"Expected location: {TEMPLATES_DIR / _template_filename(template_name)}"
        )
        raise TemplateLoadError("failed to create template from file", e)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read template {template_name}: {e}")
        raise TemplateLoadError("failed to create template from file", e)


def render_template(
    source: str,
    template_name: str,
    context: Optional[Dict[str, Any]] = None
) -> bytes:
    """
    Render template source with context values.

    Values are HTML-escaped before substitution. A literal dollar sign
    is written as $$ in the template.

    Args:
        source: Template source (with $placeholder markers)
        template_name: Template name, used in error messages
        context: Values to substitute (empty for static pages)

    Returns:
        bytes: Rendered HTML encoded as UTF-8

    Raises:
        TemplateLoadError: If a placeholder has no value or is malformed

    Example:
        >>> render_template("<p>Hello $name</p>", "greeting", {"name": "<Al>"})
        b'<p>Hello &lt;Al&gt;</p>'
    """
    escaped = {
        key: html.escape(str(value))
        for key, value in (context or {}).items()
    }

    try:
        rendered = Template(source).substitute(escaped)
    except KeyError as e:
        missing_var = str(e).strip("'")
        logger.error(f"Missing variable in template {template_name}: {missing_var}")
        raise TemplateLoadError(f"failed to render template {template_name}", e)
    except ValueError as e:
        logger.error(f"Malformed placeholder in template {template_name}: {e}")
        raise TemplateLoadError(f"failed to render template {template_name}", e)

    return rendered.encode('utf-8')
