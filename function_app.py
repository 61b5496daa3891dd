"""Azure Functions entry point — renewal timer and revocation HTTP trigger."""

import json
import logging

import azure.functions as func

from cert_renewer.errors import CertRenewerError
from cert_renewer.handlers import create_or_renew_certificate, revoke_certificate

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)


# Timer trigger: checks the stored certificate daily and renews when due
@app.function_name("renew_certificate")
@app.timer_trigger(schedule="0 0 2 * * *", arg_name="timer", run_on_startup=False)
def renew_certificate(timer: func.TimerRequest) -> None:
    result = create_or_renew_certificate()
    logging.info("Renewal finished: %s", result)


# HTTP trigger: revokes the stored certificate on demand
@app.function_name("revoke_certificate")
@app.route(route="revoke", methods=["POST"])
def revoke_stored_certificate(req: func.HttpRequest) -> func.HttpResponse:
    try:
        result = revoke_certificate()
    except CertRenewerError as exc:
        logging.error("Revocation failed: %s", exc)
        return func.HttpResponse(json.dumps({"error": str(exc)}), status_code=500, mimetype="application/json")
    return func.HttpResponse(json.dumps(result), status_code=200, mimetype="application/json")
