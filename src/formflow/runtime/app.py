"""
FastAPI application serving the formflow forms.

Routes:
- GET/POST /applicant-details: single-page form with error summary
- GET/POST /home-loan-calculator: calculator with results summary
- POST /home-loan-calculator/derived: live recomputation fragment
- GET /home-loan-enquiry, POST /home-loan-enquiry/next|previous: wizard
- POST /drawer/toggle: navigation drawer state

Submitted records are rendered back to the user, never stored or sent on.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from formflow import __version__
from formflow.core.errors import WizardError
from formflow.derived.engine import DerivedValueEngine, clamp_numeric_entry
from formflow.derived.loan import create_loan_engine
from formflow.forms.applicant_details import applicant_details_schema, applicant_details_view
from formflow.forms.base import FormView
from formflow.forms.loan_calculator import calculator_schema, calculator_view, parse_calculator
from formflow.forms.loan_enquiry import create_enquiry_wizard, loan_view, personal_view
from formflow.runtime.config import AppConfig
from formflow.runtime.htmx import HtmxDetails, htmx_response
from formflow.runtime.navigation import (
    DRAWER_COOKIE,
    NAV_ITEMS,
    DrawerState,
    get_nav_item_by_path,
)
from formflow.runtime.template_renderer import render_fragment, render_page
from formflow.runtime.wizard_cookie import cookie_name, sign_state, verify_state
from formflow.validation.session import FormSession
from formflow.wizard.controller import WizardController

logger = logging.getLogger(__name__)

ENQUIRY = "home-loan-enquiry"
_STEP_VIEWS = {"personal": personal_view, "loan": loan_view}


def _shell_context(request: Request) -> dict[str, Any]:
    """Navigation chrome shared by every page."""
    current = get_nav_item_by_path(request.url.path)
    return {
        "nav_items": NAV_ITEMS,
        "current_nav": current,
        "page_title": current.label if current else "formflow",
        "drawer": DrawerState.from_cookie(request.cookies.get(DRAWER_COOKIE)),
    }


def _page(request: Request, template: str, status_code: int = 200, **kwargs: Any) -> HTMLResponse:
    html = render_page(template, **_shell_context(request), **kwargs)
    return HTMLResponse(content=html, status_code=status_code)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the application.

    Args:
        config: Runtime configuration; read from the environment when omitted.
    """
    config = config or AppConfig.from_env()
    if config.uses_dev_secret:
        logger.warning("FORMFLOW_SECRET_KEY is not set; wizard cookies use the development key")

    app = FastAPI(title="formflow", version=__version__)
    router = APIRouter()

    # =========================================================================
    # App shell
    # =========================================================================

    async def index() -> Response:
        return RedirectResponse(url=NAV_ITEMS[0].path, status_code=302)

    async def toggle_drawer(request: Request) -> Response:
        drawer = DrawerState.from_cookie(request.cookies.get(DRAWER_COOKIE)).toggle()
        back = request.headers.get("referer") or "/"
        response = RedirectResponse(url=back, status_code=303)
        response.set_cookie(DRAWER_COOKIE, drawer.to_cookie(), httponly=True, samesite="lax")
        return response

    # =========================================================================
    # Applicant details
    # =========================================================================

    async def applicant_details_get(request: Request) -> Response:
        schema = applicant_details_schema()
        session = FormSession(schema)
        view = applicant_details_view(schema)
        return _page(
            request,
            "pages/applicant_details.html",
            fields=view.compose_all(session),
            summary=None,
            submitted_record=None,
        )

    async def applicant_details_post(request: Request) -> Response:
        schema = applicant_details_schema()
        view = applicant_details_view(schema)
        form = await request.form()
        session = FormSession(schema, initial=view.parse(form))
        result = session.submit()
        return _page(
            request,
            "pages/applicant_details.html",
            status_code=200 if result.is_valid else 422,
            fields=applicant_details_view(schema).compose_all(session),
            summary=session.summary,
            submitted_record=result.record if result.is_valid else None,
        )

    # =========================================================================
    # Home loan calculator
    # =========================================================================

    def _calculator_context(
        session: FormSession, engine: DerivedValueEngine, show_results: bool
    ) -> dict[str, Any]:
        view = calculator_view(session.record, engine.snapshot, session.schema)
        return {
            "fields": view.compose_all(session),
            "snapshot": engine.snapshot,
            "record": session.record,
            "show_results": show_results,
        }

    async def calculator_get(request: Request) -> Response:
        session = FormSession(calculator_schema())
        engine = create_loan_engine()
        engine.bind(session)
        return _page(
            request,
            "pages/loan_calculator.html",
            **_calculator_context(session, engine, show_results=False),
        )

    async def calculator_post(request: Request) -> Response:
        form = await request.form()
        session = FormSession(calculator_schema(), initial=parse_calculator(form))
        engine = create_loan_engine()
        engine.bind(session)
        result = session.submit()
        return _page(
            request,
            "pages/loan_calculator.html",
            status_code=200 if result.is_valid else 422,
            **_calculator_context(session, engine, show_results=result.is_valid),
        )

    async def calculator_derived(request: Request) -> Response:
        """Recompute after one field change; a new property price resets the deposit."""
        form = await request.form()
        record = parse_calculator(form)
        previous_price = form.get("previous_property_price")
        session = FormSession(calculator_schema(), initial=record)
        engine = create_loan_engine()
        if previous_price not in (None, ""):
            session.set_value("property_price", clamp_numeric_entry(previous_price, 0), notify=False)
            engine.bind(session)
            session.change("property_price", record["property_price"])
        else:
            engine.bind(session)

        context = _calculator_context(session, engine, show_results=False)
        if HtmxDetails.from_request(request).is_htmx:
            return htmx_response(render_fragment("fragments/calculator_form.html", **context))
        return _page(request, "pages/loan_calculator.html", **context)

    # =========================================================================
    # Home loan enquiry wizard
    # =========================================================================

    cname = cookie_name(ENQUIRY)

    def _load_wizard(request: Request) -> WizardController:
        state = verify_state(request.cookies.get(cname), config.secret_key, config.cookie_max_age)
        if state is not None:
            try:
                return create_enquiry_wizard(state=state)
            except WizardError as e:
                logger.warning("Discarding wizard state: %s", e.message)
        return create_enquiry_wizard()

    def _step_page(
        request: Request,
        wizard: WizardController,
        session: FormSession,
        view: FormView,
        status_code: int = 200,
    ) -> HTMLResponse:
        return _page(
            request,
            "pages/loan_enquiry.html",
            status_code=status_code,
            step=wizard.current_step,
            progress=wizard.progress(),
            is_first=wizard.is_first,
            is_last=wizard.is_last,
            fields=view.compose_all(session),
            summary=session.summary,
        )

    def _redirect_to_step(request: Request, wizard: WizardController) -> Response:
        url = f"/{ENQUIRY}"
        if HtmxDetails.from_request(request).is_htmx:
            response: Response = htmx_response("", redirect=url)
        else:
            response = RedirectResponse(url=url, status_code=303)
        if wizard.state is not None:
            response.set_cookie(
                cname,
                sign_state(wizard.state, config.secret_key),
                httponly=True,
                samesite="lax",
                max_age=config.cookie_max_age,
            )
        return response

    async def enquiry_get(request: Request) -> Response:
        wizard = _load_wizard(request)
        step = wizard.current_step
        session = FormSession(step.schema, initial=wizard.initial_data())
        return _step_page(request, wizard, session, _STEP_VIEWS[step.name](step.schema))

    async def enquiry_next(request: Request) -> Response:
        wizard = _load_wizard(request)
        step = wizard.current_step
        view = _STEP_VIEWS[step.name](step.schema)
        record = view.parse(await request.form())
        result = wizard.advance(record)

        if not result.is_valid:
            session = FormSession(step.schema, initial=record)
            session.show_result(result)
            return _step_page(request, wizard, session, _STEP_VIEWS[step.name](step.schema), 422)

        if wizard.is_complete:
            response = _page(
                request,
                "pages/enquiry_complete.html",
                composite=wizard.composite(),
                by_step=wizard.composite_by_step(),
                steps=wizard.steps,
            )
            response.delete_cookie(cname)
            return response

        return _redirect_to_step(request, wizard)

    async def enquiry_previous(request: Request) -> Response:
        wizard = _load_wizard(request)
        try:
            wizard.retreat()
        except WizardError as e:
            logger.debug("Ignoring previous: %s", e.message)
        return _redirect_to_step(request, wizard)

    # =========================================================================
    # Registration
    # =========================================================================

    router.get("/", response_class=HTMLResponse)(index)
    router.post("/drawer/toggle")(toggle_drawer)
    router.get("/applicant-details", response_class=HTMLResponse)(applicant_details_get)
    router.post("/applicant-details", response_class=HTMLResponse)(applicant_details_post)
    router.get("/home-loan-calculator", response_class=HTMLResponse)(calculator_get)
    router.post("/home-loan-calculator", response_class=HTMLResponse)(calculator_post)
    router.post("/home-loan-calculator/derived", response_class=HTMLResponse)(calculator_derived)
    router.get(f"/{ENQUIRY}", response_class=HTMLResponse)(enquiry_get)
    router.post(f"/{ENQUIRY}/next", response_class=HTMLResponse)(enquiry_next)
    router.post(f"/{ENQUIRY}/previous", response_class=HTMLResponse)(enquiry_previous)

    app.include_router(router)
    logger.debug("Registered %d routes", len(router.routes))
    return app
