from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
import logging
import os

import html2odf
from html2odf.converter_api import build_document, markdown_to_page

logger = logging.getLogger('html2odf')

app = FastAPI(title="HTML to ODT Converter API")

# Enable CORS for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ODT_MEDIA_TYPE = html2odf.HtmlToOdt.MEDIA_TYPE


@app.post("/convert")
@app.post("/api/convert")  # Support both paths
async def convert_html(
    html: str = Form(None),
    file: UploadFile = File(None),
    line_numbered: bool = Form(False),
):
    if not html and not file:
        raise HTTPException(status_code=400, detail="No HTML content provided")

    replaces = {}
    if html:
        content = html
    else:
        try:
            content = (await file.read()).decode("utf-8")
        except UnicodeDecodeError:
            raise HTTPException(status_code=400, detail="Uploaded file is not UTF-8 text")
        ext = os.path.splitext(file.filename or "")[1].lower()
        if ext in (".md", ".markdown"):
            content, replaces = markdown_to_page(content)

    try:
        document = build_document([(content, replaces)], line_numbered=line_numbered)
        data = document.finish_and_get_document()
    except html2odf.OdfError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=data,
        media_type=ODT_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="document.odt"'},
    )


@app.get("/health")
def health_check():
    return {"status": "ok", "version": html2odf.__version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
