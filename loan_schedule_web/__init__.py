"""Flask front end for the loan schedule calculator."""
