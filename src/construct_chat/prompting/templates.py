"""Instruction-mode prompt templates.

Placeholders: {{guidance}}, {{instruction}}, {{context}}, {{examples}}.
"""

INSTRUCT_PROMPT = """
### Instruction:
{{instruction}}

### Response:
"""

INSTRUCT_PROMPT_WITH_GUIDANCE = """
### Instruction:
{{instruction}}

### Guidance:
{{guidance}}

### Response:
"""

INSTRUCT_PROMPT_WITH_CONTEXT = """
### Context:
{{context}}

### Instruction:
{{instruction}}

### Response:
"""

INSTRUCT_PROMPT_WITH_EXAMPLES = """
### Context:
{{context}}

### Examples:
{{examples}}

### Instruction:
{{instruction}}

### Response:
"""

INSTRUCT_PROMPT_WITH_GUIDANCE_AND_CONTEXT = """
### Context:
{{context}}

### Instruction:
{{instruction}}

### Guidance:
{{guidance}}

### Response:
"""

INSTRUCT_PROMPT_WITH_GUIDANCE_AND_EXAMPLES = """
### Examples:
{{examples}}

### Instruction:
{{instruction}}

### Guidance:
{{guidance}}

### Response:
"""

INSTRUCT_PROMPT_WITH_GUIDANCE_AND_CONTEXT_AND_EXAMPLES = """
### Context:
{{context}}

### Examples:
{{examples}}

### Instruction:
{{instruction}}

### Guidance:
{{guidance}}

### Response:
"""
