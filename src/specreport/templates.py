"""Section templates for report pages.

Every page is assembled from these sections in a fixed order (see
:mod:`specreport.pipeline`). Each section is rendered with a single value
bound to ``data``. Sections that open an element are closed by a later
section, usually ``END_DIV``.

Any section added here must also be listed in ``SECTIONS``.
"""
from __future__ import annotations

HTML_PAGE_START = "html_page_start"
REPORT_OVERVIEW = "report_overview"
SIDEBAR = "sidebar"
CONGRATS = "congrats"
HOOK_FAILURE = "hook_failure"
TAGS = "tags"
MESSAGE = "message"
SKIPPED_REASON = "skipped_reason"
SPECS_START = "specs_start"
SPEC_CONTAINER_START = "spec_container_start"
SPEC_ITEMS_CONTAINER = "spec_items_container"
SPEC_ITEMS_CONTENTS = "spec_items_contents"
SPEC_HEADER_START = "spec_header_start"
SPEC_ERROR = "spec_error"
SPEC_COMMENTS_AND_TABLE = "spec_comments_and_table"
SCENARIO_CONTAINER_START = "scenario_container_start"
SCENARIO_HEADER_START = "scenario_header_start"
HEADER_END = "header_end"
MAIN_END = "main_end"
END_DIV = "end_div"
CONCEPT_START = "concept_start"
STEP_START = "step_start"
STEP_BODY = "step_body"
STEP_FAILURE = "step_failure"
STEP_END = "step_end"
CONCEPT_SPAN = "concept_span"
CONTEXT_OR_TEARDOWN_START = "context_or_teardown_start"
COMMENT = "comment"
CONCEPT_STEPS_START = "concept_steps_start"
BODY_FOOTER = "body_footer"
HTML_PAGE_END = "html_page_end"

_HTML_PAGE_START = """<!doctype html>
<html>
<head>
  <meta http-equiv="X-UA-Compatible" content="IE=EDGE" />
  <meta charset="utf-8"/>
  <title>{{ data.project_name }} - Test Results</title>
  <link rel="shortcut icon" type="image/x-icon" href="{{ data.base_path }}images/favicon.ico">
  <link rel="stylesheet" type="text/css" href="{{ data.base_path }}css/normalize.css" />
  <link rel="stylesheet" type="text/css" href="{{ data.base_path }}css/style.css" />
</head>
<body>
<header class="top">
  <div class="header">
    <div class="container">
      <div class="logo">
        <a href="{{ data.base_path }}index.html"><img src="{{ data.base_path }}images/logo.png" alt="Report logo"></a>
      </div>
      <h2 class="project">Project: {{ data.project_name }}</h2>
    </div>
  </div>
</header>
<main class="main-container">
<div class="container">"""

_REPORT_OVERVIEW = """<div class="report-overview">
  <div class="report_chart">
    <div class="chart">
      <svg></svg>
    </div>
    <div class="total-specs"><span class="value">{{ data.summary.total }}</span><span class="txt">Total specs</span></div>
  </div>
  <div class="report_test-results">
    <ul>
      <li class="fail spec-filter" data-status="failed"><span class="value">{{ data.summary.failed }}</span><span class="txt">Failed</span></li>
      <li class="pass spec-filter" data-status="passed"><span class="value">{{ data.summary.passed }}</span><span class="txt">Passed</span></li>
      <li class="skip spec-filter" data-status="skipped"><span class="value">{{ data.summary.skipped }}</span><span class="txt">Skipped</span></li>
    </ul>
  </div>
  <div class="report_details">
    <ul>
      <li>
        <label>Environment </label>
        <span>{{ data.env }}</span>
      </li>
      {% if data.tags %}
      <li>
        <label>Tags </label>
        <span>{{ data.tags }}</span>
      </li>
      {% endif %}
      <li>
        <label>Success Rate </label>
        <span>{{ data.success_rate }}%</span>
      </li>
      <li>
        <label>Total Time </label>
        <span>{{ data.exec_time }}</span>
      </li>
      <li>
        <label>Generated On </label>
        <span>{{ data.timestamp }}</span>
      </li>
    </ul>
  </div>
</div>"""

_SIDEBAR = """{% if not data.is_before_hook_failure %}<aside class="sidebar">
  <h3 class="title">Specifications</h3>

  <div class="searchbar">
    <input id="searchSpecifications" placeholder="Type specification or tag name" type="text" />
  </div>

  <div id="listOfSpecifications">
    <ul id="scenarios" class="spec-list">
    {% for meta in data.specs %}
      <a href="{{ meta.report_file }}">
        <li class='{% if meta.failed %}failed{% elif meta.skipped %}skipped{% else %}passed{% endif %} spec-name'>
          <span class="scenarioname">{{ meta.spec_name }}</span>
          <span class="time">{{ meta.exec_time }}</span>
        </li>
      </a>
    {% endfor %}
    </ul>
  </div>
</aside>{% endif %}"""

_CONGRATS = """
  <div class="congratulations details">
    <p>Congratulations! You've gone all <span class="green">green</span> and saved the environment!</p>
  </div>"""

_SCREENSHOT = """{% if data.screenshot %}<div class="screenshot-container">
        <a href="data:image/png;base64,{{ data.screenshot }}" rel="lightbox">
          <img src="data:image/png;base64,{{ data.screenshot }}" class="screenshot-thumbnail" />
        </a>
      </div>{% endif %}"""

_HOOK_FAILURE = """<div class="error-container failed hook-failure">
  <div class="error-heading">{{ data.hook_name }} Failed:<span class="error-message"> {{ data.error_message }}</span></div>
  <div class="toggleShow" data-toggle="collapse" data-target="#hookFailureDetails">
    <span>[Show details]</span>
  </div>
  <div class="exception-container" id="hookFailureDetails">
      <div class="exception">
        <pre class="stacktrace">{{ data.stack_trace }}</pre>
      </div>
      """ + _SCREENSHOT + """
  </div>
</div>"""

_TAGS = """{% if data.tags %}<div class="tags scenario_tags contentSection">
  <strong>Tags:</strong>
  {% for tag in data.tags %}<span> {{ tag }}</span>{% endfor %}
</div>{% endif %}"""

_MESSAGE = """{% if data.messages %}<div class="message-container">
  {% for message in data.messages %}<p class="step-message">{{ message | encode_newlines }}</p>{% endfor %}
</div>{% endif %}"""

_SKIPPED_REASON = """<div class="message-container">
  <h4 class="skipReason">Skipped Reason: {{ data.skip_reason }}</h4>
</div>"""

_SPEC_HEADER_START = """<header class="curr-spec">
  <h3 class="spec-head" title="{{ data.file_name }}">{{ data.spec_name }}</h3>
  <div class="spec-filename">
    <label for="specFileName">File Path</label>
    <input id="specFileName" value="{{ data.file_name }}" readonly>
  </div>
  <span class="time">{{ data.exec_time }}</span>"""

_SPEC_ERROR = """<div class="error-container failed spec-errors">
  <div class="error-heading">Errors:</div>
  <ul class="errors">
    {% for error in data.errors %}<li class="error-message">{{ error }}</li>{% endfor %}
  </ul>
</div>"""

_SPEC_COMMENTS_AND_TABLE = """{% for comment in data.comments_before_table %}<span>{{ comment | markdown | sanitize | safe }}</span>{% endfor %}
{% if data.table %}<table class="data-table">
  <tr>
    {% for header in data.table.headers %}<th>{{ header }}</th>{% endfor %}
  </tr>
  <tbody data-rowCount={{ data.table.rows | length }}>
    {% for row in data.table.rows %}
    <tr class='row-selector {{ row.status | status_class }}{% if loop.index0 == 0 %} selected{% endif %}' data-rowIndex={{ loop.index0 }}>
      {% for cell in row.cells %}<td>{{ cell }}</td>{% endfor %}
    </tr>
    {% endfor %}
  </tbody>
</table>{% endif %}
{% for comment in data.comments_after_table %}<span>{{ comment | markdown | sanitize | safe }}</span>{% endfor %}"""

_SCENARIO_CONTAINER_START = (
    "<div class='scenario-container {{ data.status | status_class }}{% if data.hidden %} hidden{% endif %}'"
    "{% if data.is_table_driven %} data-tablerow={{ data.table_row_index }}{% endif %}>"
)

_SCENARIO_HEADER_START = """<div class="scenario-head">
  <h3 class="head borderBottom">{{ data.heading }}</h3>
  <span class="time">{{ data.exec_time }}</span>"""

_STEP_META = """
  {% if data.result.status.value != 'skipped' %}
  <h5 class='execution-time'>
  <span class='time'>Execution Time : {{ data.result.exec_time }}</span>
  </h5>
  {% endif %}
    <div class='step-info {{ data.result.status | status_class }}'>
    <ul>
      <li class='step'>
        <div class='step-txt'>"""

_STEP_BODY = """{% macro table(t) %}<table>
  <tr>
    {% for header in t.headers %}<th>{{ header }}</th>{% endfor %}
  </tr>
  <tbody>
    {% for row in t.rows %}
    <tr>{% for cell in row.cells %}<td>{{ cell }}</td>{% endfor %}</tr>
    {% endfor %}
  </tbody>
</table>{% endmacro %}
{% for fragment in data.fragments %}
  {% if fragment.kind == 0 %}
    <span>{{ fragment.text }}</span>
  {% elif fragment.kind in (1, 2) %}
    <span class='parameter'>"{{ fragment.text }}"</span>
  {% elif fragment.kind == 3 %}
    <span class="hoverable">&lt;{{ fragment.name }}&gt;</span>
    <div class="hovercard">{{ fragment.text }}</div>
  {% elif fragment.kind == 4 %}
    <span class="hoverable">&lt;{{ fragment.name }}&gt;</span>
    <div class="hovercard">{{ table(fragment.table) }}</div>
  {% elif fragment.kind == 5 %}
    <div class='inline-table'>
      <div>
        {{ table(fragment.table) }}
      </div>
    </div>
  {% endif %}
{% endfor %}
</div>"""

_STEP_FAILURE = """<div class="error-container failed">
  <div class="exception-container">
      <div class="exception">
        <h4 class="error-message">
          <pre>{{ data.error_message }}</pre>
        </h4>
        <pre class="stacktrace">{{ data.stack_trace }}</pre>
      </div>
      """ + _SCREENSHOT + """
  </div>
</div>"""

_HTML_PAGE_END = """<script src="{{ data.base_path }}js/search_index.js" type="text/javascript"></script>
<script src="{{ data.base_path }}js/main.js" type="text/javascript"></script>
<script type="text/javascript">
  var summary = {passed: {{ data.summary.passed }}, failed: {{ data.summary.failed }}, skipped: {{ data.summary.skipped }}};
</script>
</body>
</html>"""

SECTIONS: dict[str, str] = {
    HTML_PAGE_START: _HTML_PAGE_START,
    REPORT_OVERVIEW: _REPORT_OVERVIEW,
    SIDEBAR: _SIDEBAR,
    CONGRATS: _CONGRATS,
    HOOK_FAILURE: _HOOK_FAILURE,
    TAGS: _TAGS,
    MESSAGE: _MESSAGE,
    SKIPPED_REASON: _SKIPPED_REASON,
    SPECS_START: '<div class="specifications">',
    SPEC_CONTAINER_START: '<div id="specificationContainer" class="details">',
    SPEC_ITEMS_CONTAINER: '<div id="specItemsContainer">',
    SPEC_ITEMS_CONTENTS: '<div class="content">',
    SPEC_HEADER_START: _SPEC_HEADER_START,
    SPEC_ERROR: _SPEC_ERROR,
    SPEC_COMMENTS_AND_TABLE: _SPEC_COMMENTS_AND_TABLE,
    SCENARIO_CONTAINER_START: _SCENARIO_CONTAINER_START,
    SCENARIO_HEADER_START: _SCENARIO_HEADER_START,
    HEADER_END: "</header>",
    MAIN_END: "</main>",
    END_DIV: "</div>",
    CONCEPT_START: "<div class='step concept'>" + _STEP_META,
    STEP_START: "<div class='step'>" + _STEP_META,
    STEP_BODY: _STEP_BODY,
    STEP_FAILURE: _STEP_FAILURE,
    STEP_END: "</li></ul></div></div>",
    CONCEPT_SPAN: '<i class="fa fa-plus-square" aria-hidden="true"></i>',
    CONTEXT_OR_TEARDOWN_START: "<div class='context-step'>",
    COMMENT: "<span>{{ data.text | markdown | sanitize | safe }}</span>",
    CONCEPT_STEPS_START: "<div class='concept-steps'>",
    BODY_FOOTER: """<footer class="footer">
  <div class="container">
    <p>Generated by specreport</p>
  </div>
</footer>""",
    HTML_PAGE_END: _HTML_PAGE_END,
}
