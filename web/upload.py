"""
Upload Router - proof-of-payment documents.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse

from exceptions import BusinessLogicError, ValidationError
from services import UploadService
from templates_utils import render_template
from util_logger import LoggerFactory, ComponentType
from .dependencies import flash, get_upload_service, verify_csrf

logger = LoggerFactory.create_logger(ComponentType.CONTROLLER, "UploadRouter")

router = APIRouter(prefix="/upload", tags=["upload"])


@router.get("", response_class=HTMLResponse)
def index(request: Request):
    return render_template(request, "upload/index.html", form={"order_id": "", "customer_name": ""},
                           nav_active="upload")


@router.post("", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
def upload(request: Request,
           order_id: str = Form(""),
           customer_name: str = Form(""),
           proof_of_payment: Optional[UploadFile] = File(None),
           uploads: UploadService = Depends(get_upload_service)):
    logger.info(f"Proof of payment upload received. OrderId: {order_id}, Customer: {customer_name}")
    form = {"order_id": order_id, "customer_name": customer_name}

    data = b""
    filename = ""
    if proof_of_payment is not None and proof_of_payment.filename:
        data = proof_of_payment.file.read()
        filename = proof_of_payment.filename

    try:
        result = uploads.upload_proof_of_payment(data, filename, order_id, customer_name)
    except ValidationError as e:
        return render_template(request, "upload/index.html", form=form, errors=[e.message], nav_active="upload")
    except BusinessLogicError as e:
        logger.error(f"❌ Error uploading file. OrderId: {order_id}, Customer: {customer_name}: {e}")
        return render_template(request, "upload/index.html", form=form,
                               errors=[f"Error uploading file: {e}"], nav_active="upload")

    flash(request, "success", f"File uploaded successfully! File name: {result.blob_name}")
    return render_template(request, "upload/index.html", form={"order_id": "", "customer_name": ""},
                           nav_active="upload")
