"""
AWS Lambda Handlers Module.

One module per Lambda function, each exposing ``lambda_handler``:

- products_handler: product catalog REST API
- product_events_handler: stores product events (direct invoke)
- orders_handler: orders REST API
- order_events_handler: stores order events (SNS)
- order_events_fetch_handler: order event history REST API
- order_emails_handler: customer notifications (SQS, partial batch responses)
- billing_handler: billing records of created orders (SNS)
"""
