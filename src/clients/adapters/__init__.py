"""boto3 implementations of the client interfaces."""
