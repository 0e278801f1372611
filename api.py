# api.py
import logging

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from auth import authenticate, check_admin_credentials, register_user
from config import get_settings
from errors import DuplicateUserError, ResumeParseError, SkillAnalysisError
from evaluator import evaluate_interview_answer
from file_utils import extract_text_from_pdf, looks_like_pdf
from question_generator import generate_interview_questions
from report_generator import summarize_interview
from schemas import (
    AdminLoginRequest,
    AnalyzeSkillsInput,
    EvaluateAnswerInput,
    GenerateQuestionsInput,
    HistoryQuery,
    InterviewSummaryRequest,
    JobIn,
    LoginRequest,
    RegisterRequest,
    SaveAnalysisRequest,
)
from skill_matcher import analyze_skills
from storage import MongoStore, get_store, is_valid_id

logging.basicConfig(
    level=get_settings().log_level,
    format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("careerpilot.api")

app = FastAPI(title="CareerPilot")


def _json(status_code: int, content) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _json(400, {"message": "Invalid input", "errors": exc.errors()})


@app.exception_handler(PyMongoError)
async def database_exception_handler(request: Request, exc: PyMongoError):
    logger.error("Database error on %s: %s", request.url.path, exc)
    return _json(500, {"message": "An internal server error occurred"})


# ---------- Resume analysis ----------


@app.post("/api/parse-resume")
async def api_parse_resume(file: UploadFile | None = File(default=None)):
    if file is None:
        return _json(400, {"error": "No file uploaded."})
    if not looks_like_pdf(file.filename, file.content_type):
        return _json(400, {"error": "File is not a PDF."})

    data = await file.read()
    try:
        text = extract_text_from_pdf(data)
    except ResumeParseError as e:
        return _json(500, {"error": "Failed to parse PDF.", "detail": str(e)})
    return {"text": text}


@app.post("/api/analyze-skills")
def api_analyze_skills(body: AnalyzeSkillsInput):
    logger.info("Received analyze-skills request")
    if not body.jobDescription or not body.resume:
        return _json(400, {"error": "Missing job description or resume text."})

    try:
        result = analyze_skills(body.jobDescription, body.resume)
    except Exception as e:
        logger.exception("Error in analyze-skills endpoint")
        debug = {}
        if isinstance(e, SkillAnalysisError) and not get_settings().is_production:
            debug = e.debug_payload()
        return _json(500, {"error": f"Failed to analyze skills: {e}", "debug": debug})

    logger.info("analyze-skills completed with score %s", result.matchScore)
    return result


@app.post("/api/save-analysis", status_code=201)
def api_save_analysis(body: SaveAnalysisRequest, store: MongoStore = Depends(get_store)):
    if (
        not body.resumeFileName
        or not body.jobDescription
        or body.matchScore is None
        or not body.userEmail
    ):
        return _json(400, {"message": "Missing required fields"})

    analysis_id = store.save_analysis(
        user_email=body.userEmail,
        resume_file_name=body.resumeFileName,
        job_description=body.jobDescription,
        match_score=body.matchScore,
    )
    return {"message": "Analysis saved successfully", "id": analysis_id}


@app.get("/api/history")
def api_history(userEmail: str | None = None, store: MongoStore = Depends(get_store)):
    try:
        query = HistoryQuery(userEmail=userEmail)
    except ValidationError:
        return _json(400, {"message": "Invalid or missing userEmail parameter"})
    return store.list_history(query.userEmail)


# ---------- Jobs ----------


@app.get("/api/jobs")
def api_list_jobs(store: MongoStore = Depends(get_store)):
    return store.list_jobs()


@app.post("/api/jobs", status_code=201)
def api_create_job(body: JobIn, store: MongoStore = Depends(get_store)):
    job_id = store.create_job(body.title, body.description)
    return {"message": "Job created successfully", "id": job_id}


@app.put("/api/jobs/{job_id}")
def api_update_job(job_id: str, body: JobIn, store: MongoStore = Depends(get_store)):
    if not is_valid_id(job_id):
        return _json(400, {"message": "Invalid job ID"})
    if not store.update_job(job_id, body.title, body.description):
        return _json(404, {"message": "Job not found"})
    return {"message": "Job updated successfully"}


@app.delete("/api/jobs/{job_id}")
def api_delete_job(job_id: str, store: MongoStore = Depends(get_store)):
    if not is_valid_id(job_id):
        return _json(400, {"message": "Invalid job ID"})
    if not store.delete_job(job_id):
        return _json(404, {"message": "Job not found"})
    return {"message": "Job deleted successfully"}


# ---------- Users & auth ----------


@app.get("/api/users")
def api_list_users(store: MongoStore = Depends(get_store)):
    return store.list_users()


@app.delete("/api/users/{user_id}")
def api_delete_user(user_id: str, store: MongoStore = Depends(get_store)):
    if not is_valid_id(user_id):
        return _json(400, {"message": "Invalid user ID"})
    if not store.delete_user(user_id):
        return _json(404, {"message": "User not found"})
    return {"message": "User deleted successfully"}


@app.post("/api/auth/register", status_code=201)
def api_register(body: RegisterRequest, store: MongoStore = Depends(get_store)):
    try:
        user_id = register_user(store, body)
    except DuplicateUserError as e:
        return _json(409, {"message": str(e)})
    return {"message": "User registered successfully", "userId": user_id}


@app.post("/api/auth/login")
def api_login(body: LoginRequest, store: MongoStore = Depends(get_store)):
    user = authenticate(store, body.identifier, body.password)
    if user is None:
        return _json(401, {"message": "Invalid credentials"})
    return {"message": "Login successful", "user": user}


@app.post("/api/auth/admin/login")
def api_admin_login(body: AdminLoginRequest):
    try:
        is_admin = check_admin_credentials(body.email, body.password)
    except RuntimeError as e:
        logger.error("%s", e)
        return _json(500, {"message": "Internal server error"})

    if not is_admin:
        return _json(401, {"message": "Invalid admin credentials"})
    return {"message": "Admin login successful"}


# ---------- Mock interview ----------


@app.post("/api/interview/questions")
def api_interview_questions(body: GenerateQuestionsInput):
    try:
        return generate_interview_questions(body.jobDescription)
    except Exception as e:
        logger.exception("Failed to generate interview questions")
        return _json(500, {"error": f"Failed to generate interview questions: {e}"})


@app.post("/api/interview/evaluate")
def api_interview_evaluate(body: EvaluateAnswerInput):
    try:
        return evaluate_interview_answer(
            job_description=body.jobDescription,
            question=body.question,
            user_answer=body.userAnswer,
        )
    except Exception as e:
        logger.exception("Failed to evaluate interview answer")
        return _json(500, {"error": f"Failed to evaluate answer: {e}"})


@app.post("/api/interview/summary")
def api_interview_summary(body: InterviewSummaryRequest):
    try:
        return summarize_interview(body.results)
    except ValueError as e:
        return _json(400, {"message": str(e)})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000, log_level=get_settings().log_level.lower())
