CONDITIONS = [
    "To effectively evaluate this product against comparable alternatives, it is essential to analyse and contrast its risk reward profile with those of similar products offering analogous risk reward structures.",
    "This offer involves the purchase of Fixed Deposit Notes (FDNs) in private equity. Given the inherent risks associated we strongly recommend independent advice before making any commitment.",
    "This offer contains no guarantees beyond those expressly stated herein. Upon signing, the terms outlined in this offer shall constitute a legally binding agreement between the client and the company.",
    "The applicant acknowledges understanding of the complexities involving this investment as well as the lock-in periods contained in the investment.",
    "The applicant understands that a loan agreement will come into existence after signature of this quotation and that returns paid are mirrored on the performance of the selected fund.",
    "The applicant understands the zero liquidity nature of this investment and has ensured that enough liquid investments or savings are available to provide liquidity during this investment.",
    "The applicant understands that the directors or trustees of company funds, in their collective capacity, may limit, withhold, defer or reduce payments or payouts as necessary at a moment's notice to safeguard the company's liquidity requirements and ensure financial stability.",
    "The individual, individuals or organisations entering into this agreement acknowledge and understand that this is a fixed-term contract for the duration outlined above; the term \"Exit Date\" refers to the agreed-upon end date of the agreement.",
    "The applicant understands that if shares are issued under this agreement, the shares are issued for security only and are returnable when the applicant is paid back the invested capital.",
    "The applicant retains the option to convert their capital to fixed shares at the exit date, whereafter the par value of the converted shares will be based on a comprehensive company valuation at the time of exit.",
]

INCOME_CONDITIONS = [
    "Income is calculated on the capital allocated with enhancement and is paid out at the selected allocation frequency. Income is not reinvested and the capital value remains unchanged for the duration of the term.",
]

VALIDITY = (
    "This offer remains valid for a period of {days} days from the date of issuance and the receipt of funds "
    "must occur within this time frame. All required documentation must be completed, and funds transfers "
    "finalised, on or before the expiration of the offer's validity period. Should any information remain "
    "outstanding or incomplete, a new offer must be issued and duly executed before the terms can be formally "
    "accepted by the company."
)

CONFIRMATION = (
    "I, the undersigned, hereby accept the proposal as outlined in the documentation contained herein. "
    "I confirm that I have made an informed decision based on my own financial product experience and/or "
    "external consultation with professionals. I confirm that I have the financial capacity to enter into "
    "this agreement and also the additional financial resources which allow me to enter the waiting periods, "
    "lock up periods and risk associated with this product."
)

DISCLAIMER = (
    "*Disclaimer: This proposal is for illustrative purposes only. Past performance is not indicative of future "
    "results. Private equity involves risk, including potential loss of capital. Investors should conduct "
    "independent due diligence before committing funds. This proposal, when signed and accepted, will become "
    "part of the agreement with the client."
)

SUPPORT_DOCUMENTS = [
    "Application form",
    "Copy of Identity Document / Passport",
    "Proof of Address",
    "Bank Statement",
]
