"""
OrderEmailsFunction - Lambda function entry point.

Delegates to ``service.handlers.order_emails_handler``.
"""

import os
import sys
from typing import Any, Dict

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from service.handlers.order_emails_handler import lambda_handler as order_emails_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return order_emails_handler(event, context)
