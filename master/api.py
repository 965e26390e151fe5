from fastapi import FastAPI, UploadFile, File, HTTPException

import os
import shutil
import uuid

from image_utils.errors import ValidationError
from master.master import start_job, JOB_STATUS, JOB_START_TIME, JOB_END_TIME, JOB_REPORTS
from master.request import build_request


app = FastAPI(title="Grid Image Splitter")

UPLOAD_DIR = "data/input"
OUTPUT_DIR = "data/output"
BACKGROUND_JOBS = True

os.makedirs(UPLOAD_DIR, exist_ok=True)
os.makedirs(OUTPUT_DIR, exist_ok=True)


# -----------------------------
# API
# -----------------------------
@app.post("/split")
async def split_upload(
    file: UploadFile = File(...),
    rows: str = None,
    cols: str = None,
):
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Invalid image file")

    # job_id also names the upload and tile folders
    job_id = str(uuid.uuid4())

    ext = os.path.splitext(file.filename or "")[1]
    stem = os.path.splitext(os.path.basename(file.filename or ""))[0]
    if stem in ("", ".", ".."):
        stem = job_id
    job_input_dir = os.path.join(UPLOAD_DIR, job_id)
    os.makedirs(job_input_dir, exist_ok=True)
    file_path = os.path.join(job_input_dir, f"{stem}{ext}")

    with open(file_path, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)

    try:
        request = build_request(
            file_path,
            rows=rows,
            cols=cols,
            output_dir=os.path.join(OUTPUT_DIR, job_id),
            workers=1,
        )
    except ValidationError as e:
        shutil.rmtree(job_input_dir, ignore_errors=True)
        raise HTTPException(status_code=400, detail=str(e))

    start_job(request, job_id, background=BACKGROUND_JOBS)

    return {
        "job_id": job_id,
        "status": "processing"
    }


@app.get("/status/{job_id}")
def job_status(job_id: str):
    status = JOB_STATUS.get(job_id)

    if status is None:
        raise HTTPException(status_code=404, detail="Job not found")

    return {
        "job_id": job_id,
        "status": status
    }


@app.get("/result/{job_id}")
def get_result(job_id: str):
    status = JOB_STATUS.get(job_id)

    if status is None:
        raise HTTPException(status_code=404, detail="Job not found")

    if status != "completed":
        raise HTTPException(status_code=400, detail="Job not completed")

    report = JOB_REPORTS[job_id]
    tiles = [
        path.name
        for file_report in report.files
        for path in file_report.outputs
    ]

    return {
        "job_id": job_id,
        "tiles": sorted(tiles),
        "skipped": report.tiles_skipped
    }


@app.get("/metrics")
def metrics():
    active_jobs = sum(
        1 for status in JOB_STATUS.values()
        if status == "processing"
    )

    completed_jobs = sum(
        1 for status in JOB_STATUS.values()
        if status == "completed"
    )

    failed_jobs = sum(
        1 for status in JOB_STATUS.values()
        if status.startswith("failed")
    )

    completed_job_times = [
        JOB_END_TIME[j] - JOB_START_TIME[j]
        for j in JOB_END_TIME
        if j in JOB_START_TIME
    ]

    avg_job_time = (
        sum(completed_job_times) / len(completed_job_times)
        if completed_job_times else 0
    )

    tiles_written = sum(r.tiles_written for r in JOB_REPORTS.values())

    return {
        "jobs": {
            "active": active_jobs,
            "completed": completed_jobs,
            "failed": failed_jobs
        },
        "tiles_written": tiles_written,
        "avg_job_time_sec": round(avg_job_time, 2)
    }
