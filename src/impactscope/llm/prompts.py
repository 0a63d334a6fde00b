"""Prompt templates for LLM interactions."""

SYSTEM_PROMPT = """You are an expert Software Architect for Java. Your job is to predict how a code change cascades into the modules that depend on it.

Key principles:
- CODE IS THE SOURCE OF TRUTH. Names and comments may be misleading.
- Be specific: name the fully qualified class and method that is affected
- Distinguish compile-time breaks from behavioural (semantic) breaks
- Answer with a single JSON object and nothing else"""

IMPACT_REPORT_SCHEMA = """{
  "type": "object",
  "properties": {
    "analysisId": {"type": "string", "description": "A unique ID for this analysis run."},
    "riskScore": {"type": "integer", "minimum": 1, "maximum": 10,
                  "description": "1 (low risk) to 10 (high risk / API break)."},
    "reasoning": {"type": "string", "description": "The step-by-step reasoning (chain of thought)."},
    "testStrategy": {
      "type": "object",
      "properties": {
        "scope": {"type": "string"},
        "priority": {"type": "string", "enum": ["HIGH", "MEDIUM", "LOW"]},
        "testCases": {
          "type": "array",
          "items": {
            "type": "object",
            "properties": {
              "moduleName": {"type": "string"},
              "testType": {"type": "string", "description": "e.g. Unit Test, Integration Test, E2E Test"},
              "focus": {"type": "string"}
            },
            "required": ["moduleName", "testType", "focus"]
          }
        }
      },
      "required": ["scope", "priority", "testCases"]
    },
    "impactedModules": {
      "type": "array",
      "items": {
        "type": "object",
        "properties": {
          "moduleName": {"type": "string", "description": "Fully qualified class name of the impacted module."},
          "impactType": {"type": "string",
                         "enum": ["SYNTACTIC_BREAK", "SEMANTIC_BREAK", "PERFORMANCE_RISK", "RUNTIME_RISK", "NO_IMPACT"]},
          "description": {"type": "string", "description": "The impact and the suggested fix."}
        },
        "required": ["moduleName", "impactType", "description"]
      }
    }
  },
  "required": ["analysisId", "riskScore", "reasoning", "testStrategy", "impactedModules"]
}"""

IMPACT_ANALYSIS_PROMPT = """Perform a cascading impact analysis of a change to `{member}`.

### REASONING PROCESS
Detail your reasoning step by step:
1. **Contractual change:** identify the exact change in signature, input expectations and output type/format.
2. **Direct dependencies (syntactic check):** do the CONTEXTUAL MODULES call the changed member? Which calls stop compiling or fail at runtime?
3. **Semantic dependencies (logic check):** how do new values or behaviour flow into downstream logic and cause subtle bugs?
4. **Removals (dead code check):** if a member was removed and no contextual module calls it, the removal is safe (NO_IMPACT).
5. **Risk score:** conclude with a score from 1 to 10 based on severity and scope.
6. **Test strategy:** recommend scope, priority and concrete test cases per impacted module.

### 1. CODE CHANGE
```java
{diff}
```

### 2. CONTEXTUAL MODULES (candidate callers)
```java
{context}
```

### 3. FINAL OUTPUT
Populate `impactedModules` with one entry per module that has a SYNTACTIC_BREAK, SEMANTIC_BREAK, PERFORMANCE_RISK, RUNTIME_RISK, or NO_IMPACT (for safe removals).
Keep module-specific findings out of `reasoning`; put them in `impactedModules`.
Return ONLY a valid JSON object that follows this schema:
{schema}"""

NO_CALLERS_CONTEXT = "// No candidate callers were found in the selected repositories."


def format_impact_analysis(diff: str, context: str, member: str) -> str:
    """Format the impact analysis prompt for one change."""
    return IMPACT_ANALYSIS_PROMPT.format(
        member=member,
        diff=diff.strip(),
        context=context.strip() or NO_CALLERS_CONTEXT,
        schema=IMPACT_REPORT_SCHEMA,
    )
