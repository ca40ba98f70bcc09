"""JSON API controllers. Every response uses the ``api_response`` envelope."""
