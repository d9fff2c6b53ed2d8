"""Static documentation pages and R code templates."""

from __future__ import annotations

from pathlib import PurePosixPath

TEMPLATE_NAMES = ("recipe", "model", "tune", "evaluation")

DOCS: dict[str, tuple[str, str]] = {
    # name -> (title, markdown)
    "overview": (
        "Tidymodels Overview",
        """# Tidymodels Ecosystem Overview

Tidymodels is a collection of packages for modeling and machine learning using tidyverse principles.

## Core Packages

- **rsample**: For data splitting and resampling
- **parsnip**: Provides a unified interface to models
- **recipes**: For preprocessing and feature engineering
- **workflows**: Combining preprocessing, modeling, and postprocessing
- **tune**: For hyperparameter tuning
- **yardstick**: For measuring model performance
- **dials**: Tools for creating and managing tuning parameters
- **broom**: For converting model objects into tidy data frames

## Extension Packages

- **tidyposterior**: Bayesian analysis of model performance
- **corrr**: Correlation analysis tools
- **applicable**: Checking model applicability for new data
- **spatialsample**: Spatial resampling methods
- **poissonreg**: For Poisson and negative binomial regression
- **discrim**: Models for discriminant analysis
- **embed**: For creating embeddings and learned features

For more details, visit [the tidymodels website](https://www.tidymodels.org/).
""",
    ),
    "getting-started": (
        "Getting Started",
        """# Getting Started with Tidymodels

## Installation

```r
install.packages("tidymodels")
library(tidymodels)
```

## Basic Workflow

```r
set.seed(123)
car_split <- initial_split(mtcars, prop = 0.75)
car_train <- training(car_split)
car_test <- testing(car_split)

car_recipe <- recipe(mpg ~ ., data = car_train) |>
  step_normalize(all_predictors())

lm_model <- linear_reg() |>
  set_engine("lm")

car_workflow <- workflow() |>
  add_recipe(car_recipe) |>
  add_model(lm_model)

car_fit <- fit(car_workflow, data = car_train)

predict(car_fit, car_test) |>
  bind_cols(car_test) |>
  metrics(truth = mpg, estimate = .pred)
```

## Key Steps

1. **Data Splitting** with rsample
2. **Preprocessing** with recipes
3. **Model Specification** with parsnip
4. **Workflow** to combine preprocessing and modeling
5. **Evaluation** with yardstick

For more examples and tutorials, visit [the tidymodels website](https://www.tidymodels.org/start/).
""",
    ),
}

_RECIPE = """# Recipe for preprocessing data
library(tidymodels)

# Create a recipe for data preprocessing
recipe <- recipe(target ~ ., data = data) |>
  step_normalize(all_numeric_predictors()) |>
  step_dummy(all_nominal_predictors()) |>
  step_zv(all_predictors()) |>
  step_corr(all_numeric_predictors())

# Prepare the recipe on training data
recipe_prepped <- prep(recipe, training = training_data)

# Apply to data
processed_data <- bake(recipe_prepped, new_data = data)"""

_MODEL = """# Build a tidymodels workflow for {task}
library(tidymodels)

# Define model specification
model_spec <-
  boost_tree() |>
  set_engine("xgboost") |>
  set_mode("classification") # or regression

# Create a workflow
workflow <-
  workflow() |>
  add_recipe(recipe) |>
  add_model(model_spec)

# Fit model
fitted_model <- fit(workflow, data = training_data)

# Make predictions
predictions <- predict(fitted_model, new_data = test_data)"""

_TUNE = """# Hyperparameter tuning with tidymodels
library(tidymodels)

# Define model with tuning parameters
model_spec <-
  boost_tree(
    trees = tune(),
    min_n = tune(),
    tree_depth = tune()
  ) |>
  set_engine("xgboost") |>
  set_mode("classification")

# Create workflow
workflow <-
  workflow() |>
  add_recipe(recipe) |>
  add_model(model_spec)

# Create resamples for tuning
resamples <- vfold_cv(training_data, v = 5)

# Define tuning grid
tuning_grid <- grid_latin_hypercube(
  trees(range = c(10, 2000)),
  min_n(range = c(2, 40)),
  tree_depth(range = c(1, 15)),
  size = 20
)

# Tune model
tuning_results <-
  workflow |>
  tune_grid(
    resamples = resamples,
    grid = tuning_grid,
    metrics = metric_set(roc_auc, accuracy)
  )

# Select best parameters and finalize
best_params <- select_best(tuning_results, metric = "roc_auc")
final_workflow <- finalize_workflow(workflow, best_params)
final_model <- fit(final_workflow, data = training_data)"""

_EVALUATION = """# Model evaluation with tidymodels
library(tidymodels)

# Create test/train split
set.seed(123)
data_split <- initial_split(data, prop = 0.75, strata = outcome)
train_data <- training(data_split)
test_data <- testing(data_split)

# Fit finalized model on training data
final_fit <- fit(workflow, data = train_data)

# Predict on test data
results <- bind_cols(
  test_data,
  predict(final_fit, test_data),
  predict(final_fit, test_data, type = "prob")
)

# Evaluate performance
metrics <- metric_set(accuracy, roc_auc, sensitivity, specificity)
performance <- metrics(
  results,
  truth = outcome,
  estimate = .pred_class,
  .pred_yes
)

# ROC curve
results |>
  roc_curve(truth = outcome, .pred_yes) |>
  autoplot()"""

_DEFAULT = """# Tidymodels workflow for {task}
library(tidymodels)

# Split data
set.seed(123)
data_split <- initial_split(data, prop = 0.75)
train_data <- training(data_split)
test_data <- testing(data_split)

# Preprocessing
recipe <- recipe(outcome ~ ., data = train_data) |>
  step_normalize(all_numeric_predictors()) |>
  step_dummy(all_nominal_predictors())

# Model
model_spec <-
  rand_forest() |>
  set_engine("ranger") |>
  set_mode("classification") # or regression

# Workflow
workflow <-
  workflow() |>
  add_recipe(recipe) |>
  add_model(model_spec)

# Fit and evaluate
fitted_model <- fit(workflow, data = train_data)
predict(fitted_model, test_data) |>
  bind_cols(test_data) |>
  metrics(truth = outcome, estimate = .pred_class)"""

_TEMPLATES = {
    "recipe": _RECIPE,
    "model": _MODEL,
    "tune": _TUNE,
    "evaluation": _EVALUATION,
}


def render_template(task: str, template: str | None = None) -> str:
    """R code for ``template``; unknown or missing names get the general workflow."""
    body = _TEMPLATES.get((template or "").lower(), _DEFAULT)
    return body.replace("{task}", task)


_MIME_TYPES = {
    "r": "text/r-script",
    "rmd": "text/markdown",
    "md": "text/markdown",
    "json": "application/json",
    "yml": "application/yaml",
    "yaml": "application/yaml",
    "txt": "text/plain",
}


def mime_type_for(path: str) -> str:
    suffix = PurePosixPath(path).suffix.lstrip(".").lower()
    return _MIME_TYPES.get(suffix, "text/plain")
