# src/svc_manifest/core/__init__.py
"""
Core do svc-manifest: o pipeline de resolução de manifests.

Componentes principais:
    - manifest    → modelo de dados e ManifestParser
    - schema      → SchemaRegistry, schema mestre e SchemaValidator
    - hydration   → ContextHydrator (seleção de ambiente e interpolação)
    - config      → defaults de plataforma, merge em camadas, hashing
    - resolver    → ConfigResolver (motor de precedência)
    - references  → ReferenceValidator (binds e governança)
    - engine      → ValidationOrchestrator, PipelineResult e relatório

Princípios fundamentais:
    - A mesma entrada sempre produz a mesma saída
    - Nenhum estado global: o contexto é passado explicitamente
    - Cada estágio coleta todas as violações antes de reportar

Limites explícitos:
    - Não sintetiza nem implanta recursos de nuvem
    - Não faz parsing de argumentos de CLI
    - Não persiste a configuração resolvida
"""
