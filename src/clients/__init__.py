"""Cloud service client interfaces and their boto3 adapters."""
