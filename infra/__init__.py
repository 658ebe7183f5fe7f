"""AWS CDK application deploying the e-commerce service."""
