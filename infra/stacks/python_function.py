"""
Lambda function factory shared by the stacks.

Every function is deployed from the ``src`` directory with the packages of
``src/requirements.txt`` installed next to the service code.
"""

import os
from typing import Dict, Optional

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_lambda as lambda_,
)
from constructs import Construct

SRC_DIR = os.path.join(os.path.dirname(__file__), '..', '..', 'src')

RUNTIME = lambda_.Runtime.PYTHON_3_12


def source_code() -> lambda_.Code:
    return lambda_.Code.from_asset(
        SRC_DIR,
        exclude=['**/__pycache__', '**/*.pyc'],
        bundling=BundlingOptions(
            image=RUNTIME.bundling_image,
            command=[
                'bash', '-c',
                'pip install --no-cache-dir -r requirements.txt -t /asset-output && cp -au . /asset-output',
            ],
        ),
    )


def python_function(
    scope: Construct,
    construct_id: str,
    entry_dir: str,
    environment: Optional[Dict[str, str]] = None,
    timeout_seconds: int = 30,
) -> lambda_.Function:
    """
    Create a traced Python function named after its construct id.

    Args:
        scope: Owning stack
        construct_id: Construct id, also used as function name
        entry_dir: Directory under ``src`` holding ``lambda_function.py``
        environment: Function environment variables
        timeout_seconds: Function timeout

    Returns:
        The Lambda function
    """
    return lambda_.Function(
        scope, construct_id,
        function_name=construct_id,
        runtime=RUNTIME,
        code=source_code(),
        handler=f'{entry_dir}.lambda_function.lambda_handler',
        memory_size=128,
        timeout=Duration.seconds(timeout_seconds),
        environment={
            'POWERTOOLS_SERVICE_NAME': construct_id,
            'POWERTOOLS_METRICS_NAMESPACE': 'ECommerce',
            'LOG_LEVEL': 'INFO',
            **(environment or {}),
        },
        tracing=lambda_.Tracing.ACTIVE,
        insights_version=lambda_.LambdaInsightsVersion.VERSION_1_0_143_0,
    )
