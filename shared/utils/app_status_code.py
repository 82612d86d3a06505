class AppStatusCode:
    # success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_SUCCESSFUL = "101"
    INVOICE_GENERATED = "102"

    # request problems
    INVALID_INPUT = "200"
    REQUIRED_VALIDATION_ERROR = "201"
    DUPLICATE_ADD_ERROR = "202"
    RECORD_NOT_FOUND = "203"

    # authentication / authorization
    AUTHENTICATION_TOKEN_INVALID = "300"
    AUTHENTICATION_TOKEN_EXPIRED = "301"
    UNAUTHORIZED_ACTION = "302"

    # billing
    INVOICE_DUPLICATE_PERIOD = "400"
    LEASE_NOT_ACTIVE = "401"
    LEASE_OUTSIDE_PERIOD = "402"

    OPERATION_FAILED = "500"
    OPERATION_ERROR = "501"
